"""
Schemas for outfit listings and outfit search.

Create/update payloads only enforce types here; business rules (lengths,
price bounds, coordinates, availability ranges) are checked by
outswap.services.validation so every rule failure is reported per field.

Reference: https://fastapi.tiangolo.com/tutorial/body/
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from outswap.api.v1.schemas.common import CamelModel, DateRangeSchema, LocationSchema
from outswap.models.outfit import ClothingSize, OutfitCategory

SortOption = Literal["newest", "price-low", "price-high", "rating-high", "proximity"]


class OutfitCreate(CamelModel):
    """
    Schema for listing a new outfit.

    rating, totalRatings and id are assigned by the server.
    """

    owner_id: str = Field(..., min_length=1, max_length=64, description="User listing the outfit")
    title: Optional[str] = Field(None, description="Listing title (3-100 characters)")
    description: Optional[str] = Field(None, description="Description (10-2000 characters)")
    images: Optional[List[str]] = Field(None, description="Ordered image URIs, at least one")
    size: Optional[ClothingSize] = None
    category: Optional[OutfitCategory] = None
    style_tags: Optional[List[str]] = Field(None, description="At least one style tag")
    price_per_hour: Optional[float] = None
    price_per_day: Optional[float] = None
    location: Optional[LocationSchema] = None
    availability_dates: Optional[List[DateRangeSchema]] = None
    available: bool = True


class OutfitUpdate(CamelModel):
    """
    Schema for updating an outfit.

    All fields are optional for partial updates. id, ownerId, createdAt,
    rating and totalRatings are not client-writable and are ignored.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    images: Optional[List[str]] = None
    size: Optional[ClothingSize] = None
    category: Optional[OutfitCategory] = None
    style_tags: Optional[List[str]] = None
    price_per_hour: Optional[float] = None
    price_per_day: Optional[float] = None
    location: Optional[LocationSchema] = None
    availability_dates: Optional[List[DateRangeSchema]] = None
    available: Optional[bool] = None


class OutfitResponse(CamelModel):
    """Schema for outfit response."""

    id: str
    owner_id: str
    title: str
    description: str
    images: List[str]
    size: ClothingSize
    category: OutfitCategory
    style_tags: List[str]
    price_per_hour: float
    price_per_day: float
    location: Optional[LocationSchema] = None
    availability_dates: List[DateRangeSchema] = Field(default_factory=list)
    rating: float
    total_ratings: int
    available: bool
    created_at: datetime
    updated_at: datetime
    distance_meters: Optional[float] = Field(
        None, description="Distance from the search point, when a location was supplied"
    )


class OutfitSearchParams(CamelModel):
    """
    Outfit search request.

    All supplied filters are combined with AND. Price bounds apply to
    pricePerDay and are inclusive.
    """

    query: Optional[str] = Field(None, max_length=200, description="Free-text query")
    category: Optional[OutfitCategory] = None
    size: Optional[ClothingSize] = None
    min_price: Optional[float] = Field(None, description="Minimum pricePerDay (inclusive)")
    max_price: Optional[float] = Field(None, description="Maximum pricePerDay (inclusive)")
    location: Optional[LocationSchema] = Field(
        None, description="Search center; the geo filter applies only when it has coordinates"
    )
    radius: Optional[float] = Field(None, description="Search radius in meters")
    sort_by: Optional[SortOption] = None
    page: int = Field(1, description="1-based page number")
    limit: Optional[int] = Field(None, description="Page size (defaults to 20)")


class OutfitSearchResult(CamelModel):
    """One page of search results."""

    items: List[OutfitResponse]
    total: int
    page: int
    limit: int
    total_pages: int
