"""
Routes for ratings of outfits and users.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from outswap.api.v1.schemas.common import ApiResponse, MessageResponse
from outswap.api.v1.schemas.rating import RatingCreate, RatingResponse, RatingUpdate
from outswap.core.database import get_db
from outswap.core.exceptions import NotFoundException, ValidationException
from outswap.models.rating import RatingTargetType
from outswap.services.rating import RatingService
from outswap.services.validation import errors_as_dicts

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/ratings",
    tags=["ratings"],
)


@router.post(
    "",
    response_model=ApiResponse[RatingResponse],
    summary="Create rating",
    description="Rate an outfit or a user. The target's average and count are recomputed.",
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Rating created successfully"},
        404: {"description": "Rated outfit or user not found"},
        422: {"description": "Validation error"},
    },
)
async def create_rating(
    rating_data: RatingCreate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[RatingResponse]:
    """
    Create a rating.

    **Validation:**
    - targetType is "outfit" or "user" and targetId names an existing entity
    - rating is a whole number from 1 to 5
    - comment is at most 500 characters
    """
    rating_service = RatingService()
    try:
        rating = await rating_service.create_rating(db, rating_data)
        return ApiResponse(data=RatingResponse.model_validate(rating))
    except ValidationException as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error": e.message, "errors": errors_as_dicts(e.errors)},
        ) from e
    except NotFoundException as e:
        logger.warning(f"Rating creation failed: {e.message} ({rating_data.target_id})")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=e.message
        ) from e


@router.get(
    "/outfit/{outfit_id}",
    response_model=ApiResponse[List[RatingResponse]],
    summary="Get outfit ratings",
    status_code=status.HTTP_200_OK,
)
async def get_outfit_ratings(
    outfit_id: str,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[List[RatingResponse]]:
    rating_service = RatingService()
    ratings = await rating_service.get_ratings_for_target(db, RatingTargetType.OUTFIT, outfit_id)
    return ApiResponse(data=[RatingResponse.model_validate(rating) for rating in ratings])


@router.get(
    "/user/{user_id}",
    response_model=ApiResponse[List[RatingResponse]],
    summary="Get user ratings",
    status_code=status.HTTP_200_OK,
)
async def get_user_ratings(
    user_id: str,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[List[RatingResponse]]:
    rating_service = RatingService()
    ratings = await rating_service.get_ratings_for_target(db, RatingTargetType.USER, user_id)
    return ApiResponse(data=[RatingResponse.model_validate(rating) for rating in ratings])


@router.put(
    "/{rating_id}",
    response_model=ApiResponse[RatingResponse],
    summary="Update rating",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Rating updated successfully"},
        404: {"description": "Rating not found"},
        422: {"description": "Validation error"},
    },
)
async def update_rating(
    rating_id: str,
    rating_data: RatingUpdate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[RatingResponse]:
    rating_service = RatingService()
    try:
        rating = await rating_service.update_rating(db, rating_id, rating_data)
        return ApiResponse(data=RatingResponse.model_validate(rating))
    except ValidationException as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error": e.message, "errors": errors_as_dicts(e.errors)},
        ) from e
    except NotFoundException as e:
        logger.warning(f"Rating update failed: {e.message} ({rating_id})")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=e.message
        ) from e


@router.delete(
    "/{rating_id}",
    response_model=ApiResponse[MessageResponse],
    summary="Delete rating",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Rating deleted successfully"},
        404: {"description": "Rating not found"},
    },
)
async def delete_rating(
    rating_id: str,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[MessageResponse]:
    rating_service = RatingService()
    try:
        await rating_service.delete_rating(db, rating_id)
    except NotFoundException as e:
        logger.warning(f"Rating deletion failed: {e.message} ({rating_id})")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=e.message
        ) from e
    return ApiResponse(data=MessageResponse(message="Rating deleted"))
