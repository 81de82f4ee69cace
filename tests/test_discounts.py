from decimal import Decimal

import pytest

from app.core.exceptions import BusinessRuleException
from app.shared.domain.discounts import (
    calculate_discount,
    calculate_item_total,
    discount_percentage_for,
    is_discount_eligible,
    is_ten_percent_tier,
    is_twenty_percent_tier,
    is_within_maximum_quantity,
)


@pytest.mark.parametrize("quantity", [1, 2, 3])
def test_no_discount_below_four_items(quantity):
    assert discount_percentage_for(quantity) == Decimal("0")


@pytest.mark.parametrize("quantity", [4, 5, 9])
def test_ten_percent_from_four_to_nine(quantity):
    assert discount_percentage_for(quantity) == Decimal("0.10")


@pytest.mark.parametrize("quantity", [10, 15, 20])
def test_twenty_percent_from_ten_to_twenty(quantity):
    assert discount_percentage_for(quantity) == Decimal("0.20")


@pytest.mark.parametrize("quantity", [21, 50])
def test_more_than_twenty_is_rejected(quantity):
    with pytest.raises(BusinessRuleException, match="more than 20"):
        discount_percentage_for(quantity)


def test_zero_quantity_is_rejected():
    with pytest.raises(BusinessRuleException):
        discount_percentage_for(0)


def test_tier_predicates_boundaries():
    assert not is_discount_eligible(3)
    assert is_discount_eligible(4)
    assert is_ten_percent_tier(9) and not is_ten_percent_tier(10)
    assert is_twenty_percent_tier(10) and is_twenty_percent_tier(20)
    assert not is_twenty_percent_tier(21)
    assert is_within_maximum_quantity(20) and not is_within_maximum_quantity(21)


@pytest.mark.parametrize(
    "quantity, unit_price, expected_discount, expected_total",
    [
        (5, "10", Decimal("5.00"), Decimal("45.00")),
        (15, "10", Decimal("30.00"), Decimal("120.00")),
        (3, "10", Decimal("0.00"), Decimal("30.00")),
        (4, "2.99", Decimal("1.20"), Decimal("10.76")),
    ],
)
def test_discount_and_total_examples(quantity, unit_price, expected_discount, expected_total):
    percentage = discount_percentage_for(quantity)
    discount = calculate_discount(quantity, unit_price, percentage)

    assert discount == expected_discount
    assert calculate_item_total(quantity, unit_price, discount) == expected_total
