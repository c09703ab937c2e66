"""
Schemas for ratings of outfits and users.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from outswap.api.v1.schemas.common import CamelModel
from outswap.models.rating import RatingTargetType


class RatingCreate(CamelModel):
    """
    Schema for creating a rating.

    Attributes:
        target_type: "outfit" or "user"
        target_id: ID of the rated outfit or user
        rating: Whole number between 1 and 5
        comment: Optional comment (max 500 characters)
        from_user_id: User leaving the rating
        rental_id: Optional rental the rating refers to
    """

    target_type: Optional[str] = None
    target_id: Optional[str] = None
    rating: Optional[float] = None
    comment: Optional[str] = None
    from_user_id: Optional[str] = None
    rental_id: Optional[str] = None


class RatingUpdate(CamelModel):
    """Schema for updating a rating. All fields are optional."""

    rating: Optional[float] = None
    comment: Optional[str] = None


class RatingResponse(CamelModel):
    """Schema for rating response."""

    id: str
    target_type: RatingTargetType
    target_id: str
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None
    from_user_id: str
    rental_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime
