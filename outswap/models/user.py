"""
User model. Users are the owners and renters of outfits and can be rated.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, DateTime, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from outswap.core.clock import utcnow
from outswap.core.database import Base
from outswap.models.outfit import new_id


class User(Base):
    """
    User model representing a marketplace member

    Attributes:
        id: Primary key (hex UUID)
        name: Display name
        email: Email address (unique)
        phone: Optional phone number
        location: Optional address parts
        rating: Average of all ratings targeting this user (0 when none)
        total_ratings: Number of ratings targeting this user
        created_at: Timestamp when user was created
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    location: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)

    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    total_ratings: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    def __repr__(self) -> str:
        """String representation of user"""
        return f"<User(id={self.id}, email='{self.email}')>"
