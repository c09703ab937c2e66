"""
Shared schemas: camelCase base model, response envelope and value objects.

Reference: https://docs.pydantic.dev/latest/concepts/alias/#alias-generator
"""

from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from outswap.services.validation import FieldError

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base schema: snake_case attributes, camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(CamelModel, Generic[T]):
    """
    Envelope for every successful response.

    Attributes:
        success: Always True for 2xx responses
        data: Response payload
        error: Unused on success
    """

    success: bool = True
    data: Optional[T] = None
    error: Optional[str] = None


class ErrorResponse(CamelModel):
    """Envelope for every failed response."""

    success: bool = False
    error: str = Field(..., description="Human-readable error message")
    errors: Optional[List[FieldError]] = Field(
        None, description="Field-level validation errors, when any"
    )


class MessageResponse(CamelModel):
    message: str


class LocationSchema(CamelModel):
    """Address parts plus an optional geo-point."""

    address: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    zip_code: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, max_length=100)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


class DateRangeSchema(CamelModel):
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
