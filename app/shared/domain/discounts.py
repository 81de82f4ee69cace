# app/shared/domain/discounts.py
"""
Reglas de descuento por cantidad de items idénticos.

- 1 a 3 unidades: sin descuento
- 4 a 9 unidades: 10%
- 10 a 20 unidades: 20%
- Más de 20 unidades: no se permite la venta
"""
from decimal import Decimal, ROUND_HALF_UP

from app.core.exceptions import BusinessRuleException

MIN_QUANTITY = 1
MAX_QUANTITY = 20
DISCOUNT_MIN_QUANTITY = 4
TWENTY_PERCENT_MIN_QUANTITY = 10

NO_DISCOUNT = Decimal("0.00")
TEN_PERCENT = Decimal("0.10")
TWENTY_PERCENT = Decimal("0.20")

CENTS = Decimal("0.01")

MAX_QUANTITY_MESSAGE = f"Cannot sell more than {MAX_QUANTITY} identical items."
BELOW_MIN_DISCOUNT_MESSAGE = f"Purchases below {DISCOUNT_MIN_QUANTITY} items cannot have a discount."


def is_within_maximum_quantity(quantity: int) -> bool:
    return quantity <= MAX_QUANTITY


def is_discount_eligible(quantity: int) -> bool:
    return quantity >= DISCOUNT_MIN_QUANTITY


def is_ten_percent_tier(quantity: int) -> bool:
    return DISCOUNT_MIN_QUANTITY <= quantity < TWENTY_PERCENT_MIN_QUANTITY


def is_twenty_percent_tier(quantity: int) -> bool:
    return TWENTY_PERCENT_MIN_QUANTITY <= quantity <= MAX_QUANTITY


def discount_percentage_for(quantity: int) -> Decimal:
    """
    Porcentaje de descuento que corresponde a una cantidad.

    Lanza BusinessRuleException si la cantidad está fuera de 1..20.
    """
    if not is_within_maximum_quantity(quantity):
        raise BusinessRuleException(MAX_QUANTITY_MESSAGE)
    if quantity < MIN_QUANTITY:
        raise BusinessRuleException("Quantity must be greater than zero.")

    if is_twenty_percent_tier(quantity):
        return TWENTY_PERCENT
    if is_ten_percent_tier(quantity):
        return TEN_PERCENT
    return NO_DISCOUNT


def to_money(value) -> Decimal:
    """Redondear a centavos"""
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def calculate_discount(quantity: int, unit_price, percentage: Decimal) -> Decimal:
    return to_money(to_money(unit_price) * quantity * percentage)


def calculate_item_total(quantity: int, unit_price, discount) -> Decimal:
    return to_money(to_money(unit_price) * quantity - to_money(discount))
