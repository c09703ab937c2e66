"""
Business-rule validation for outfits, rentals, ratings and users.

Every validator is pure: it inspects plain values and returns field errors,
it never touches the database. Single-field validators return one error or
None; composite validators collect every error into a ValidationResult.

Error field names use the JSON (camelCase) names clients send.
"""

import math
import re
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, List, Mapping, Optional

from pydantic import BaseModel

from outswap.core.clock import as_utc, utcnow
from outswap.models.outfit import ClothingSize, OutfitCategory
from outswap.models.rating import RatingTargetType

MAX_PRICE = 100000
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^\+?[\d\s\-()]{10,}$")


class FieldError(BaseModel):
    """A single field-level validation error."""

    field: str
    message: str


class ValidationResult(BaseModel):
    """Outcome of a composite validator."""

    is_valid: bool
    errors: List[FieldError]

    @classmethod
    def from_errors(cls, errors: List[FieldError]) -> "ValidationResult":
        return cls(is_valid=not errors, errors=errors)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float, Decimal)):
        return math.isfinite(value)
    return False


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse a datetime, date or ISO-8601 string into an aware UTC datetime."""
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, date):
        return as_utc(datetime(value.year, value.month, value.day))
    if isinstance(value, str) and value.strip():
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            return as_utc(datetime.fromisoformat(raw))
        except ValueError:
            return None
    return None


def validate_price(value: Any, field: str = "price", label: str = "Price") -> Optional[FieldError]:
    if value is None:
        return FieldError(field=field, message=f"{label} is required")
    if not _is_number(value):
        return FieldError(field=field, message=f"{label} must be a valid number")
    if value <= 0:
        return FieldError(field=field, message=f"{label} must be greater than 0")
    if value > MAX_PRICE:
        return FieldError(field=field, message=f"{label} seems unreasonably high")
    return None


def validate_date(value: Any, field: str = "date", label: str = "Date") -> Optional[FieldError]:
    if value is None or value == "":
        return FieldError(field=field, message=f"{label} is required")
    if parse_datetime(value) is None:
        return FieldError(field=field, message=f"{label} is not a valid date")
    return None


def validate_date_range(
    start: Any,
    end: Any,
    start_field: str = "startDate",
    end_field: str = "endDate",
) -> List[FieldError]:
    """Both dates must be valid and end must be strictly after start."""
    errors = []
    start_error = validate_date(start, start_field, "Start date")
    if start_error:
        errors.append(start_error)
    end_error = validate_date(end, end_field, "End date")
    if end_error:
        errors.append(end_error)
    if errors:
        return errors

    if parse_datetime(end) <= parse_datetime(start):
        errors.append(FieldError(field=end_field, message="End date must be after start date"))
    return errors


def validate_future_date(
    value: Any,
    field: str = "date",
    label: str = "Date",
    now: Optional[datetime] = None,
) -> Optional[FieldError]:
    error = validate_date(value, field, label)
    if error:
        return error
    if parse_datetime(value) < (as_utc(now) if now else utcnow()):
        return FieldError(field=field, message=f"{label} must be in the future")
    return None


def validate_string(
    value: Any,
    field: str,
    label: str,
    min_length: int = 1,
    max_length: int = 10000,
) -> Optional[FieldError]:
    if not value or not isinstance(value, str):
        return FieldError(field=field, message=f"{label} is required")
    trimmed = value.strip()
    if len(trimmed) < min_length:
        return FieldError(field=field, message=f"{label} must be at least {min_length} characters")
    if len(trimmed) > max_length:
        return FieldError(field=field, message=f"{label} must not exceed {max_length} characters")
    return None


def validate_array(value: Any, field: str, label: str, min_length: int = 1) -> Optional[FieldError]:
    if not isinstance(value, (list, tuple)):
        return FieldError(field=field, message=f"{label} must be a list")
    if len(value) < min_length:
        return FieldError(field=field, message=f"{label} must contain at least {min_length} item(s)")
    return None


def validate_email(value: Any) -> Optional[FieldError]:
    if not value:
        return FieldError(field="email", message="Email is required")
    if not isinstance(value, str) or not EMAIL_PATTERN.match(value):
        return FieldError(field="email", message="Invalid email format")
    return None


def validate_phone(value: Any) -> Optional[FieldError]:
    if not value:
        return FieldError(field="phone", message="Phone number is required")
    if not isinstance(value, str) or not PHONE_PATTERN.match(value):
        return FieldError(field="phone", message="Invalid phone number format")
    return None


def validate_rating(value: Any) -> Optional[FieldError]:
    """Ratings are whole numbers between 1 and 5."""
    if value is None:
        return FieldError(field="rating", message="Rating is required")
    if not _is_number(value):
        return FieldError(field="rating", message="Rating must be a number")
    if value != int(value):
        return FieldError(field="rating", message="Rating must be a whole number")
    if value < 1 or value > 5:
        return FieldError(field="rating", message="Rating must be between 1 and 5")
    return None


def _enum_error(value: Any, enum_cls, field: str, label: str) -> Optional[FieldError]:
    if not value:
        return FieldError(field=field, message=f"{label} is required")
    allowed = [member.value for member in enum_cls]
    raw = value.value if isinstance(value, enum_cls) else value
    if raw not in allowed:
        return FieldError(field=field, message=f"{label} must be one of: {', '.join(allowed)}")
    return None


def _collect(errors: List[FieldError], *results: Optional[FieldError]) -> None:
    errors.extend(result for result in results if result is not None)


def _range_bounds(date_range: Any) -> tuple[Any, Any]:
    if isinstance(date_range, Mapping):
        return (
            date_range.get("start_date", date_range.get("startDate")),
            date_range.get("end_date", date_range.get("endDate")),
        )
    return getattr(date_range, "start_date", None), getattr(date_range, "end_date", None)


def validate_outfit_input(outfit: Mapping[str, Any]) -> ValidationResult:
    """
    Validate a complete outfit listing.

    Args:
        outfit: Outfit fields keyed by their snake_case attribute names

    Returns:
        ValidationResult with every failing field
    """
    errors: List[FieldError] = []

    _collect(
        errors,
        validate_string(outfit.get("title"), "title", "Title", 3, 100),
        validate_string(outfit.get("description"), "description", "Description", 10, 2000),
        validate_array(outfit.get("images"), "images", "Images", 1),
    )

    price_per_hour = outfit.get("price_per_hour")
    price_per_day = outfit.get("price_per_day")
    hourly_error = validate_price(price_per_hour, "pricePerHour", "Price per hour")
    daily_error = validate_price(price_per_day, "pricePerDay", "Price per day")
    _collect(errors, hourly_error, daily_error)

    # A daily rate at or above 24 hourly rates would never be charged
    if not hourly_error and not daily_error and price_per_day >= price_per_hour * 24:
        errors.append(
            FieldError(
                field="pricePerDay",
                message="Daily price should be less than 24x hourly price",
            )
        )

    _collect(
        errors,
        _enum_error(outfit.get("size"), ClothingSize, "size", "Size"),
        _enum_error(outfit.get("category"), OutfitCategory, "category", "Category"),
    )

    style_tags = outfit.get("style_tags")
    if not style_tags:
        errors.append(FieldError(field="styleTags", message="At least one style tag is required"))

    location = outfit.get("location")
    if not location:
        errors.append(FieldError(field="location", message="Location is required"))
    else:
        if isinstance(location, Mapping):
            latitude, longitude = location.get("latitude"), location.get("longitude")
        else:
            latitude = getattr(location, "latitude", None)
            longitude = getattr(location, "longitude", None)
        if not latitude or not longitude:
            errors.append(FieldError(field="location", message="Valid coordinates are required"))

    availability = outfit.get("availability_dates")
    availability_error = validate_array(availability, "availabilityDates", "Availability dates", 1)
    if availability_error:
        errors.append(availability_error)
    else:
        for index, date_range in enumerate(availability):
            start, end = _range_bounds(date_range)
            for error in validate_date_range(start, end):
                errors.append(
                    FieldError(
                        field=f"availabilityDates[{index}].{error.field}",
                        message=error.message,
                    )
                )

    return ValidationResult.from_errors(errors)


def validate_rental_input(
    rental: Mapping[str, Any], now: Optional[datetime] = None
) -> ValidationResult:
    """Validate a rental request: outfit, date range and a future start."""
    errors: List[FieldError] = []

    if not rental.get("outfit_id"):
        errors.append(FieldError(field="outfitId", message="Outfit ID is required"))
    if not rental.get("renter_id"):
        errors.append(FieldError(field="renterId", message="Renter ID is required"))

    date_errors = validate_date_range(rental.get("start_date"), rental.get("end_date"))
    errors.extend(date_errors)
    if not date_errors:
        _collect(
            errors,
            validate_future_date(rental.get("start_date"), "startDate", "Start date", now=now),
        )

    return ValidationResult.from_errors(errors)


def clean_comment(comment: Any) -> Any:
    """Blank comments count as no comment."""
    if isinstance(comment, str) and not comment.strip():
        return None
    return comment


def _validate_comment(comment: Any) -> Optional[FieldError]:
    comment = clean_comment(comment)
    if comment:
        return validate_string(comment, "comment", "Comment", 1, 500)
    return None


def validate_rating_input(rating: Mapping[str, Any]) -> ValidationResult:
    """Validate a new rating: target, value and optional comment."""
    errors: List[FieldError] = []

    if not rating.get("target_id"):
        errors.append(FieldError(field="targetId", message="Target ID is required"))

    target_type = rating.get("target_type")
    if isinstance(target_type, RatingTargetType):
        target_type = target_type.value
    if target_type not in [member.value for member in RatingTargetType]:
        errors.append(
            FieldError(
                field="targetType",
                message='Target type must be either "outfit" or "user"',
            )
        )

    if not rating.get("from_user_id"):
        errors.append(FieldError(field="fromUserId", message="Rating author is required"))

    _collect(errors, validate_rating(rating.get("rating")), _validate_comment(rating.get("comment")))
    return ValidationResult.from_errors(errors)


def validate_rating_update(changes: Mapping[str, Any]) -> ValidationResult:
    """Validate a partial rating update. Only supplied fields are checked."""
    errors: List[FieldError] = []
    if "rating" in changes:
        _collect(errors, validate_rating(changes["rating"]))
    if "comment" in changes:
        _collect(errors, _validate_comment(changes["comment"]))
    return ValidationResult.from_errors(errors)


def validate_user_input(user: Mapping[str, Any]) -> ValidationResult:
    errors: List[FieldError] = []
    _collect(
        errors,
        validate_string(user.get("name"), "name", "Name", 1, 100),
        validate_email(user.get("email")),
    )
    if user.get("phone"):
        _collect(errors, validate_phone(user.get("phone")))
    return ValidationResult.from_errors(errors)


def errors_as_dicts(errors: Iterable[FieldError]) -> List[dict]:
    return [error.model_dump() for error in errors]
