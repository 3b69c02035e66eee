"""
Booking price calculation.

The total is derived from the stay duration and the space's rates:

- a monthly rate is used for stays of 30 days or more, billed per started month
- otherwise the daily rate is used per day
- otherwise the monthly rate is prorated at monthly/30 per day

The platform keeps PLATFORM_FEE_RATE of the total; the landlord receives the
rest. Rounding to cents happens once, on the final total and fee, and the
landlord amount is computed by subtraction so fee + landlord == total exactly.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping

from golocal_spaces.config import CURRENCY, PLATFORM_FEE_RATE
from golocal_spaces.errors import ValidationError
from golocal_spaces.utils.money import quantize, to_decimal

DAYS_PER_MONTH = 30
SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True)
class PriceQuote:
    """Result of pricing a date range against a space's rates."""

    days: int
    total_price: Decimal
    platform_fee: Decimal
    landlord_amount: Decimal
    currency: str = CURRENCY


def duration_days(start: date | datetime, end: date | datetime) -> int:
    """
    Number of billable days in [start, end), rounding partial days up.

    Args:
        start: Range start (inclusive)
        end: Range end (exclusive)

    Returns:
        int: ceil((end - start) / 1 day); zero or negative for empty ranges
    """
    delta = end - start
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY)


def calculate_price(
    rates: Mapping[str, Any],
    start: date | datetime,
    end: date | datetime,
    fee_rate: Decimal = PLATFORM_FEE_RATE,
) -> PriceQuote:
    """
    Price a stay against a space's rate fields.

    Args:
        rates: Mapping with price_per_day / price_per_month (a space row)
        start: First day of the stay
        end: Day after the last day of the stay
        fee_rate: Platform fee fraction

    Returns:
        PriceQuote: total, platform fee and landlord share, rounded to cents

    Raises:
        ValidationError: If the range is empty or the space has no usable rate
    """
    days = duration_days(start, end)
    if days <= 0:
        raise ValidationError("end_date must be after start_date")

    monthly = to_decimal(rates.get("price_per_month"))
    daily = to_decimal(rates.get("price_per_day"))

    if monthly and days >= DAYS_PER_MONTH:
        months_billed = math.ceil(days / DAYS_PER_MONTH)
        total = monthly * months_billed
    elif daily:
        total = daily * days
    elif monthly:
        total = monthly / DAYS_PER_MONTH * days
    else:
        raise ValidationError("Space has no price for the requested dates")

    total_price = quantize(total)
    platform_fee = quantize(total_price * fee_rate)
    return PriceQuote(
        days=days,
        total_price=total_price,
        platform_fee=platform_fee,
        landlord_amount=total_price - platform_fee,
    )
