"""Rental price calculation tests."""

from datetime import datetime, timedelta, timezone

import pytest

from outswap.services.pricing import calculate_price, rental_duration

START = datetime(2030, 6, 1, 9, 0, tzinfo=timezone.utc)


def test_daily_rate_wins_when_cheaper():
    assert calculate_price(START, START + timedelta(hours=23), 1.0, 20.0) == 20.0


def test_hourly_rate_wins_for_short_rentals():
    assert calculate_price(START, START + timedelta(hours=3), 10.0, 60.0) == 30.0


def test_partial_hours_are_billed_as_full_hours():
    assert rental_duration(START, START + timedelta(minutes=90)) == (2, 1)
    assert calculate_price(START, START + timedelta(minutes=90), 10.0, 60.0) == 20.0


def test_days_are_derived_from_rounded_up_hours():
    assert rental_duration(START, START + timedelta(hours=24)) == (24, 1)
    assert rental_duration(START, START + timedelta(hours=24, minutes=1)) == (25, 2)
    assert calculate_price(START, START + timedelta(hours=25), 10.0, 60.0) == 120.0


def test_result_is_rounded_to_cents():
    assert calculate_price(START, START + timedelta(hours=3), 3.333, 70.0) == 10.0


@pytest.mark.parametrize("price_per_hour,price_per_day", [(1.0, 20.0), (7.5, 45.0), (12.0, 200.0)])
def test_price_is_bounded_and_monotonic(price_per_hour, price_per_day):
    previous = 0.0
    for minutes in range(15, 24 * 60 * 5, 45):
        end = START + timedelta(minutes=minutes)
        hours, days = rental_duration(START, end)
        price = calculate_price(START, end, price_per_hour, price_per_day)
        assert price <= round(hours * price_per_hour, 2)
        assert price <= round(days * price_per_day, 2)
        assert price >= previous
        previous = price
