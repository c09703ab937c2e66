"""
Rating model for outfits and users.

A rating targets exactly one entity, identified by the tagged pair
(target_type, target_id).
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from outswap.core.clock import utcnow
from outswap.core.database import Base
from outswap.models.outfit import new_id


class RatingTargetType(str, Enum):
    """Rating target type enumeration."""

    OUTFIT = "outfit"
    USER = "user"


class Rating(Base):
    """
    Rating left by a user for an outfit or another user.

    Attributes:
        id: Primary key (hex UUID)
        target_type: "outfit" or "user"
        target_id: ID of the rated outfit or user
        rating: Rating value (1-5)
        comment: Optional comment
        from_user_id: User who left the rating
        rental_id: Optional rental the rating refers to
        created_at: Timestamp when rating was created
        updated_at: Timestamp when rating was last updated
    """

    __tablename__ = "ratings"

    __table_args__ = (
        Index("ix_ratings_target", "target_type", "target_id"),
        Index("ix_ratings_from_user_id", "from_user_id"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)

    target_type: Mapped[str] = mapped_column(String(10), nullable=False)
    target_id: Mapped[str] = mapped_column(String(64), nullable=False)

    rating: Mapped[int] = mapped_column(
        Integer, nullable=False, comment="Rating value (1-5 stars)"
    )
    comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    from_user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    rental_id: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    def __repr__(self) -> str:
        """String representation of rating"""
        return (
            f"<Rating(id={self.id}, target_type='{self.target_type}', "
            f"target_id={self.target_id}, rating={self.rating})>"
        )
