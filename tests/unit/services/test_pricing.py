"""Unit tests for booking price calculation."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from golocal_spaces.errors import ValidationError
from golocal_spaces.services.pricing import calculate_price, duration_days


@pytest.mark.unit
def test_daily_rate_ten_days() -> None:
    quote = calculate_price({"price_per_day": Decimal("150")}, date(2025, 1, 1), date(2025, 1, 11))

    assert quote.days == 10
    assert quote.total_price == Decimal("1500.00")
    assert quote.platform_fee == Decimal("150.00")
    assert quote.landlord_amount == Decimal("1350.00")


@pytest.mark.unit
def test_monthly_rate_bills_per_started_month() -> None:
    rates = {"price_per_month": Decimal("3500"), "price_per_day": Decimal("150")}

    quote = calculate_price(rates, date(2025, 1, 1), date(2025, 3, 1))

    assert quote.days == 59
    assert quote.total_price == Decimal("7000.00")
    assert quote.platform_fee == Decimal("700.00")


@pytest.mark.unit
def test_daily_rate_used_below_thirty_days_even_with_monthly_rate() -> None:
    rates = {"price_per_month": Decimal("3500"), "price_per_day": Decimal("150")}

    quote = calculate_price(rates, date(2025, 1, 1), date(2025, 1, 30))

    assert quote.days == 29
    assert quote.total_price == Decimal("4350.00")


@pytest.mark.unit
def test_monthly_rate_exactly_thirty_days() -> None:
    quote = calculate_price(
        {"price_per_month": Decimal("3000")}, date(2025, 1, 1), date(2025, 1, 31)
    )

    assert quote.days == 30
    assert quote.total_price == Decimal("3000.00")


@pytest.mark.unit
def test_monthly_only_prorated_for_short_stays() -> None:
    quote = calculate_price({"price_per_month": Decimal("1000")}, date(2025, 1, 1), date(2025, 1, 8))

    # 1000 / 30 * 7 = 233.333...
    assert quote.total_price == Decimal("233.33")
    assert quote.platform_fee == Decimal("23.33")
    assert quote.landlord_amount == Decimal("210.00")


@pytest.mark.unit
def test_fee_and_landlord_amount_sum_to_total() -> None:
    quote = calculate_price({"price_per_day": Decimal("33.35")}, date(2025, 5, 1), date(2025, 5, 4))

    assert quote.total_price == Decimal("100.05")
    assert quote.platform_fee == Decimal("10.01")
    assert quote.platform_fee + quote.landlord_amount == quote.total_price


@pytest.mark.unit
def test_weekly_rate_alone_is_not_priceable() -> None:
    with pytest.raises(ValidationError, match="no price"):
        calculate_price({"price_per_week": Decimal("500")}, date(2025, 1, 1), date(2025, 1, 8))


@pytest.mark.unit
@pytest.mark.parametrize(
    "start, end",
    [
        (date(2025, 1, 10), date(2025, 1, 10)),
        (date(2025, 1, 10), date(2025, 1, 1)),
    ],
)
def test_empty_or_reversed_range_is_rejected(start: date, end: date) -> None:
    with pytest.raises(ValidationError):
        calculate_price({"price_per_day": Decimal("100")}, start, end)


@pytest.mark.unit
def test_partial_days_round_up() -> None:
    assert duration_days(datetime(2025, 1, 1, 9), datetime(2025, 1, 2, 10)) == 2


@pytest.mark.unit
def test_custom_fee_rate() -> None:
    quote = calculate_price(
        {"price_per_day": Decimal("100")},
        date(2025, 1, 1),
        date(2025, 1, 2),
        fee_rate=Decimal("0.15"),
    )

    assert quote.platform_fee == Decimal("15.00")
    assert quote.landlord_amount == Decimal("85.00")
