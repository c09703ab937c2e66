"""
Outfit listing model.

Reference: https://docs.sqlalchemy.org/en/21/orm/declarative_tables.html
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import JSON, Boolean, DateTime, Float, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from outswap.core.clock import utcnow
from outswap.core.database import Base


class ClothingSize(str, Enum):
    """Clothing size enumeration."""

    XXS = "XXS"
    XS = "XS"
    S = "S"
    M = "M"
    L = "L"
    XL = "XL"
    XXL = "XXL"
    XXXL = "XXXL"


class OutfitCategory(str, Enum):
    """Outfit category enumeration."""

    FORMAL = "formal"
    CASUAL = "casual"
    SPORTSWEAR = "sportswear"
    PARTY = "party"
    BUSINESS = "business"
    WEDDING = "wedding"
    SEASONAL = "seasonal"
    OTHER = "other"


def new_id() -> str:
    return uuid.uuid4().hex


class Outfit(Base):
    """
    Outfit listed for rental by its owner.

    Attributes:
        id: Primary key (hex UUID)
        owner_id: User who listed the outfit
        title: Listing title
        description: Free-text description
        images: Ordered list of image URIs
        size: Clothing size (XXS..XXXL)
        category: Outfit category
        style_tags: Style tags used for search
        price_per_hour: Hourly rate
        price_per_day: Daily rate
        location: Address parts (address, city, state, zipCode, country)
        latitude: Geo-point latitude, copied out of location for distance queries
        longitude: Geo-point longitude
        availability_dates: List of {startDate, endDate} ranges
        rating: Average of all ratings targeting this outfit (0 when none)
        total_ratings: Number of ratings targeting this outfit
        available: Whether the outfit is listed for rent
        created_at: Timestamp when outfit was created
        updated_at: Timestamp when outfit was last updated
    """

    __tablename__ = "outfits"

    __table_args__ = (
        Index("ix_outfits_owner_id", "owner_id"),
        Index("ix_outfits_category", "category"),
        Index("ix_outfits_size", "size"),
        Index("ix_outfits_created_at", "created_at"),
        Index("ix_outfits_rating", "rating"),
        Index("ix_outfits_available_price", "available", "price_per_day"),
        Index("ix_outfits_lat_lon", "latitude", "longitude"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)

    owner_id: Mapped[str] = mapped_column(
        String(64), nullable=False, comment="User who listed the outfit"
    )

    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    images: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    # Enums stored as strings, validated in the pydantic schemas
    size: Mapped[str] = mapped_column(String(8), nullable=False)
    category: Mapped[str] = mapped_column(String(20), nullable=False)

    style_tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    price_per_hour: Mapped[float] = mapped_column(Float, nullable=False)
    price_per_day: Mapped[float] = mapped_column(Float, nullable=False)

    location: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    availability_dates: Mapped[list[dict]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Availability ranges; overlap is not enforced",
    )

    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    total_ratings: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Timestamps are set in Python so ordering by created_at keeps sub-second precision
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    def __repr__(self) -> str:
        """String representation of outfit"""
        return (
            f"<Outfit(id={self.id}, title='{self.title}', category='{self.category}', "
            f"size='{self.size}', price_per_day={self.price_per_day})>"
        )
