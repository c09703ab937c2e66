"""
Schemas for rentals.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from outswap.api.v1.schemas.common import CamelModel
from outswap.models.rental import RentalStatus


class RentalCreate(CamelModel):
    """
    Schema for requesting a rental.

    The owner and total price are derived from the outfit on the server.
    """

    outfit_id: Optional[str] = None
    renter_id: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    notes: Optional[str] = Field(None, max_length=1000)


class RentalCancel(CamelModel):
    reason: Optional[str] = Field(None, max_length=500, description="Why the rental was cancelled")


class RentalResponse(CamelModel):
    """Schema for rental response."""

    id: str
    outfit_id: str
    renter_id: str
    owner_id: str
    start_date: datetime
    end_date: datetime
    total_price: float
    status: RentalStatus
    notes: Optional[str] = None
    cancel_reason: Optional[str] = None
    created_at: datetime
    updated_at: datetime
