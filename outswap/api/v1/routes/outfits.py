"""
Routes for outfit listings, search and nearby discovery.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from outswap.api.v1.schemas.common import ApiResponse, MessageResponse
from outswap.api.v1.schemas.outfit import (
    OutfitCreate,
    OutfitResponse,
    OutfitSearchParams,
    OutfitSearchResult,
    OutfitUpdate,
)
from outswap.core.database import get_db
from outswap.core.exceptions import (
    InvalidParameterException,
    NotFoundException,
    ValidationException,
)
from outswap.models.outfit import Outfit
from outswap.services.outfit import OutfitService
from outswap.services.validation import errors_as_dicts

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/outfits",
    tags=["outfits"],
)


def _to_response(outfit: Outfit, distance: Optional[float] = None) -> OutfitResponse:
    response = OutfitResponse.model_validate(outfit)
    if distance is not None:
        response.distance_meters = round(distance, 1)
    return response


@router.post(
    "",
    response_model=ApiResponse[OutfitResponse],
    summary="Create outfit",
    description="List a new outfit for rent.",
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Outfit created successfully"},
        422: {"description": "Validation error"},
    },
)
async def create_outfit(
    outfit_data: OutfitCreate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[OutfitResponse]:
    """
    Create a new outfit listing.

    **Validation:**
    - Title 3-100 characters, description 10-2000 characters
    - At least one image and one style tag
    - Prices greater than 0, daily price below 24x the hourly price
    - Location with valid coordinates
    - Every availability range must end after it starts
    """
    outfit_service = OutfitService()
    try:
        outfit = await outfit_service.create_outfit(db, outfit_data)
        return ApiResponse(data=_to_response(outfit))
    except ValidationException as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error": e.message, "errors": errors_as_dicts(e.errors)},
        ) from e


@router.post(
    "/search",
    response_model=ApiResponse[OutfitSearchResult],
    summary="Search outfits",
    description="Free-text search with filters, sorting and pagination.",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Search results"},
        400: {"description": "Malformed filter or paging parameter"},
    },
)
async def search_outfits(
    params: OutfitSearchParams,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[OutfitSearchResult]:
    """
    Search available outfits.

    **Filters** (combined with AND):
    - `category`, `size`: exact match
    - `minPrice`, `maxPrice`: inclusive bounds on pricePerDay
    - `location` + `radius`: geo-radius in meters (ignored without coordinates)

    **Ordering:**
    - With a `query` and the default sort, results are ranked by relevance
    - Otherwise `sortBy` applies: newest, price-low, price-high, rating-high, proximity
    """
    outfit_service = OutfitService()
    try:
        page = await outfit_service.search_outfits(db, params)
    except InvalidParameterException as e:
        logger.warning(f"Outfit search rejected: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=e.message
        ) from e

    return ApiResponse(
        data=OutfitSearchResult(
            items=[_to_response(outfit, page.distances.get(outfit.id)) for outfit in page.items],
            total=page.total,
            page=page.page,
            limit=page.limit,
            total_pages=page.total_pages,
        )
    )


@router.get(
    "/owner/{owner_id}",
    response_model=ApiResponse[List[OutfitResponse]],
    summary="Get outfits by owner",
    status_code=status.HTTP_200_OK,
)
async def get_outfits_by_owner(
    owner_id: str,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[List[OutfitResponse]]:
    """Get all outfits listed by a user, newest first."""
    outfit_service = OutfitService()
    outfits = await outfit_service.get_outfits_by_owner(db, owner_id)
    logger.info(f"Retrieved {len(outfits)} outfits for owner {owner_id}")
    return ApiResponse(data=[_to_response(outfit) for outfit in outfits])


@router.get(
    "/nearby/{latitude}/{longitude}",
    response_model=ApiResponse[List[OutfitResponse]],
    summary="Get nearby outfits",
    description="Available outfits within a radius of a point, nearest first (max 50).",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Nearby outfits"},
        400: {"description": "Coordinates or radius out of range"},
    },
)
async def get_nearby_outfits(
    latitude: float,
    longitude: float,
    radius: Optional[float] = Query(
        None, description="Radius in meters (defaults to 8046.72, i.e. 5 miles)"
    ),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[List[OutfitResponse]]:
    outfit_service = OutfitService()
    try:
        nearby = await outfit_service.get_nearby_outfits(db, latitude, longitude, radius)
    except InvalidParameterException as e:
        logger.warning(f"Nearby search rejected: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=e.message
        ) from e
    return ApiResponse(data=[_to_response(outfit, distance) for outfit, distance in nearby])


@router.get(
    "/{outfit_id}",
    response_model=ApiResponse[OutfitResponse],
    summary="Get outfit",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Outfit retrieved successfully"},
        404: {"description": "Outfit not found"},
    },
)
async def get_outfit(
    outfit_id: str,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[OutfitResponse]:
    outfit_service = OutfitService()
    outfit = await outfit_service.get_outfit(db, outfit_id)
    if not outfit:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Outfit not found"
        )
    return ApiResponse(data=_to_response(outfit))


@router.put(
    "/{outfit_id}",
    response_model=ApiResponse[OutfitResponse],
    summary="Update outfit",
    description="Partial update; id, ownerId, createdAt, rating and totalRatings cannot be changed.",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Outfit updated successfully"},
        404: {"description": "Outfit not found"},
        422: {"description": "Validation error"},
    },
)
async def update_outfit(
    outfit_id: str,
    outfit_data: OutfitUpdate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[OutfitResponse]:
    """
    Update an outfit.

    Only supplied fields change; the resulting listing must still pass
    validation.
    """
    outfit_service = OutfitService()
    try:
        outfit = await outfit_service.update_outfit(db, outfit_id, outfit_data)
        return ApiResponse(data=_to_response(outfit))
    except NotFoundException as e:
        logger.warning(f"Outfit update failed: {e.message} ({outfit_id})")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=e.message
        ) from e
    except ValidationException as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error": e.message, "errors": errors_as_dicts(e.errors)},
        ) from e


@router.delete(
    "/{outfit_id}",
    response_model=ApiResponse[MessageResponse],
    summary="Delete outfit",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Outfit deleted successfully"},
        404: {"description": "Outfit not found"},
    },
)
async def delete_outfit(
    outfit_id: str,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[MessageResponse]:
    outfit_service = OutfitService()
    try:
        await outfit_service.delete_outfit(db, outfit_id)
    except NotFoundException as e:
        logger.warning(f"Outfit deletion failed: {e.message} ({outfit_id})")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=e.message
        ) from e
    return ApiResponse(data=MessageResponse(message="Outfit deleted"))
