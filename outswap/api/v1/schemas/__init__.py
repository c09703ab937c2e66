"""
Pydantic schemas for API request/response models
"""

from outswap.api.v1.schemas.common import ApiResponse, ErrorResponse, LocationSchema
from outswap.api.v1.schemas.outfit import (
    OutfitCreate,
    OutfitResponse,
    OutfitSearchParams,
    OutfitSearchResult,
    OutfitUpdate,
)
from outswap.api.v1.schemas.rating import RatingCreate, RatingResponse, RatingUpdate
from outswap.api.v1.schemas.rental import RentalCancel, RentalCreate, RentalResponse
from outswap.api.v1.schemas.user import UserCreate, UserResponse, UserUpdate

__all__ = [
    "ApiResponse",
    "ErrorResponse",
    "LocationSchema",
    "OutfitCreate",
    "OutfitResponse",
    "OutfitSearchParams",
    "OutfitSearchResult",
    "OutfitUpdate",
    "RatingCreate",
    "RatingResponse",
    "RatingUpdate",
    "RentalCancel",
    "RentalCreate",
    "RentalResponse",
    "UserCreate",
    "UserResponse",
    "UserUpdate",
]
