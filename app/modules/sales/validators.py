# app/modules/sales/validators.py
from typing import List

from app.shared.database.models import Sale, SaleItem, utcnow
from app.shared.domain.discounts import (
    BELOW_MIN_DISCOUNT_MESSAGE, MAX_QUANTITY, MAX_QUANTITY_MESSAGE,
    NO_DISCOUNT, TEN_PERCENT, TWENTY_PERCENT,
    calculate_item_total, is_discount_eligible, is_ten_percent_tier,
    is_twenty_percent_tier, to_money
)

SALE_NUMBER_MAX_LENGTH = 50
NAME_MAX_LENGTH = 100


def _check_text(value, field: str, max_length: int) -> List[str]:
    if not value or not str(value).strip():
        return [f"{field} is required."]
    if len(value) > max_length:
        return [f"{field} cannot exceed {max_length} characters."]
    return []


def expected_discount_percentage(quantity: int):
    if is_twenty_percent_tier(quantity):
        return TWENTY_PERCENT
    if is_ten_percent_tier(quantity):
        return TEN_PERCENT
    return NO_DISCOUNT


def validate_sale_item(item: SaleItem) -> List[str]:
    """
    Validar las invariantes de un item ya calculado.

    Retorna la lista de errores (vacía si el item es válido).
    """
    errors = _check_text(item.product, "Product", NAME_MAX_LENGTH)

    if item.quantity is None or item.quantity <= 0:
        errors.append("Quantity must be greater than zero.")
        return errors
    if item.quantity > MAX_QUANTITY:
        errors.append(MAX_QUANTITY_MESSAGE)

    if item.unit_price is None or to_money(item.unit_price) <= 0:
        errors.append("Unit price must be greater than zero.")
        return errors

    discount = to_money(item.discount or 0)
    gross = to_money(item.unit_price) * item.quantity

    if discount < 0:
        errors.append("Discount cannot be negative.")
    elif discount > gross:
        errors.append("Discount cannot be greater than the total item value.")

    if not is_discount_eligible(item.quantity) and discount > 0:
        errors.append(BELOW_MIN_DISCOUNT_MESSAGE)

    if item.quantity <= MAX_QUANTITY:
        percentage = to_money(item.discount_percentage or 0)
        if percentage != expected_discount_percentage(item.quantity):
            errors.append("Incorrect discount percentage applied based on quantity rules.")

    if to_money(item.total_amount or 0) != calculate_item_total(item.quantity, item.unit_price, discount):
        errors.append("Total amount calculation is incorrect.")

    return errors


def validate_sale(sale: Sale) -> List[str]:
    """Validar la venta completa, incluyendo cada uno de sus items"""
    errors = []
    errors += _check_text(sale.sale_number, "Sale number", SALE_NUMBER_MAX_LENGTH)
    errors += _check_text(sale.customer, "Customer", NAME_MAX_LENGTH)
    errors += _check_text(sale.branch, "Branch", NAME_MAX_LENGTH)

    if sale.sale_date is None:
        errors.append("Sale date is required.")
    elif sale.sale_date > utcnow():
        errors.append("Sale date cannot be in the future.")

    if sale.total_amount is not None and to_money(sale.total_amount) < 0:
        errors.append("Total amount cannot be negative.")

    if not sale.items:
        errors.append("A sale must have at least one item.")

    for position, item in enumerate(sale.items, start=1):
        errors += [f"Item {position}: {message}" for message in validate_sale_item(item)]

    return errors
