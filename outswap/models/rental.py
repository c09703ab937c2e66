"""
Rental model and its lifecycle states.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, Float, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from outswap.core.clock import utcnow
from outswap.core.database import Base
from outswap.models.outfit import new_id


class RentalStatus(str, Enum):
    """
    Rental lifecycle states.

    pending -> confirmed -> active -> returned, with cancelled reachable from
    any state. disputed is set by processes outside this service.
    """

    PENDING = "pending"
    CONFIRMED = "confirmed"
    ACTIVE = "active"
    RETURNED = "returned"
    CANCELLED = "cancelled"
    DISPUTED = "disputed"


class Rental(Base):
    """
    Booking of an outfit by a renter for a date span.

    Rentals are never deleted; cancellation is a status.

    Attributes:
        id: Primary key (hex UUID)
        outfit_id: Rented outfit
        renter_id: User renting the outfit
        owner_id: Outfit owner at creation time (denormalized)
        start_date: Rental start
        end_date: Rental end (after start_date)
        total_price: Price computed once at creation
        status: Current lifecycle status
        notes: Optional renter notes
        cancel_reason: Optional reason recorded on cancellation
        created_at: Timestamp when rental was created
        updated_at: Timestamp of the last transition
    """

    __tablename__ = "rentals"

    __table_args__ = (
        Index("ix_rentals_renter_id", "renter_id"),
        Index("ix_rentals_owner_id", "owner_id"),
        Index("ix_rentals_outfit_id", "outfit_id"),
        Index("ix_rentals_status", "status"),
        Index("ix_rentals_start_date", "start_date"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)

    # No foreign key: rentals outlive deleted outfits
    outfit_id: Mapped[str] = mapped_column(String(32), nullable=False)
    renter_id: Mapped[str] = mapped_column(String(64), nullable=False)
    owner_id: Mapped[str] = mapped_column(String(64), nullable=False)

    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    total_price: Mapped[float] = mapped_column(Float, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=RentalStatus.PENDING.value
    )

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    cancel_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    def __repr__(self) -> str:
        """String representation of rental"""
        return (
            f"<Rental(id={self.id}, outfit_id={self.outfit_id}, "
            f"renter_id={self.renter_id}, status='{self.status}')>"
        )
