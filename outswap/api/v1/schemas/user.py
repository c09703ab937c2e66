"""
Schemas for marketplace users.
"""

from datetime import datetime
from typing import Optional

from outswap.api.v1.schemas.common import CamelModel, LocationSchema


class UserCreate(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[LocationSchema] = None


class UserUpdate(CamelModel):
    """
    Schema for updating a user profile.

    All fields are optional for partial updates. id, createdAt, rating and
    totalRatings are not client-writable and are ignored.
    """

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[LocationSchema] = None


class UserResponse(CamelModel):
    """Schema for user response."""

    id: str
    name: str
    email: str
    phone: Optional[str] = None
    location: Optional[LocationSchema] = None
    rating: float
    total_ratings: int
    created_at: datetime
