"""
Database models
All SQLAlchemy models should be defined here or imported here
"""

from outswap.core.database import Base
from outswap.models.outfit import ClothingSize, Outfit, OutfitCategory
from outswap.models.rating import Rating, RatingTargetType
from outswap.models.rental import Rental, RentalStatus
from outswap.models.user import User

__all__ = [
    "Base",
    "ClothingSize",
    "Outfit",
    "OutfitCategory",
    "Rating",
    "RatingTargetType",
    "Rental",
    "RentalStatus",
    "User",
]
