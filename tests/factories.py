"""Builders for request bodies and database rows used across tests."""

from datetime import datetime, timedelta, timezone

from outswap.models.outfit import Outfit
from outswap.models.user import User

BASE_TIME = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def outfit_payload(**overrides) -> dict:
    """A valid camelCase outfit body for POST /api/outfits."""
    payload = {
        "ownerId": "owner-1",
        "title": "Emerald Evening Gown",
        "description": "Floor-length silk gown, worn once to a gala.",
        "images": ["https://img.example.com/gown-1.jpg"],
        "size": "M",
        "category": "formal",
        "styleTags": ["elegant", "silk"],
        "pricePerHour": 10.0,
        "pricePerDay": 60.0,
        "location": {
            "address": "1 Market St",
            "city": "San Francisco",
            "state": "CA",
            "zipCode": "94105",
            "country": "US",
            "latitude": 37.7936,
            "longitude": -122.3958,
        },
        "availabilityDates": [
            {"startDate": "2030-01-01T00:00:00Z", "endDate": "2030-12-31T00:00:00Z"}
        ],
    }
    payload.update(overrides)
    return payload


def make_outfit(index: int = 0, **overrides) -> Outfit:
    """An Outfit row with deterministic ids and strictly increasing created_at."""
    values = dict(
        id=f"outfit{index:04d}",
        owner_id="owner-1",
        title=f"Outfit {index}",
        description="A plain listing used by the search tests.",
        images=["https://img.example.com/plain.jpg"],
        size="M",
        category="casual",
        style_tags=["basic"],
        price_per_hour=5.0,
        price_per_day=50.0,
        location=None,
        latitude=None,
        longitude=None,
        availability_dates=[],
        rating=0.0,
        total_ratings=0,
        available=True,
        created_at=BASE_TIME + timedelta(minutes=index),
        updated_at=BASE_TIME + timedelta(minutes=index),
    )
    values.update(overrides)
    return Outfit(**values)


def make_user(index: int = 0, **overrides) -> User:
    values = dict(
        id=f"user{index:04d}",
        name=f"User {index}",
        email=f"user{index}@example.com",
        rating=0.0,
        total_ratings=0,
    )
    values.update(overrides)
    return User(**values)
