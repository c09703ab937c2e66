"""
Rental price calculation.

A rental is billed by whichever scheme is cheaper: every started hour at the
hourly rate, or every started day at the daily rate.
"""

import math
from datetime import datetime, timedelta

ONE_HOUR = timedelta(hours=1)


def rental_duration(start: datetime, end: datetime) -> tuple[int, int]:
    """
    Billable duration of a rental.

    Partial hours count as full hours and days are derived from the
    rounded-up hours.

    Returns:
        Tuple of (hours, days)
    """
    hours = math.ceil((end - start) / ONE_HOUR)
    days = math.ceil(hours / 24)
    return hours, days


def calculate_price(
    start: datetime,
    end: datetime,
    price_per_hour: float,
    price_per_day: float,
) -> float:
    """
    Compute the total price of a rental.

    The caller guarantees end > start.

    Args:
        start: Rental start
        end: Rental end
        price_per_hour: Hourly rate
        price_per_day: Daily rate

    Returns:
        min(hours * price_per_hour, days * price_per_day), rounded to cents
    """
    hours, days = rental_duration(start, end)
    hourly_total = hours * price_per_hour
    daily_total = days * price_per_day
    return round(min(hourly_total, daily_total), 2)
