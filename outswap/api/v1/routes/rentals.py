"""
Routes for rentals and their lifecycle transitions.

Transition endpoints answer 404 when the rental does not exist and 409
when it exists but is in a status the transition does not start from.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from outswap.api.v1.schemas.common import ApiResponse
from outswap.api.v1.schemas.rental import RentalCancel, RentalCreate, RentalResponse
from outswap.core.database import get_db
from outswap.core.exceptions import (
    InvalidStateException,
    NotFoundException,
    ValidationException,
)
from outswap.services.rental import RentalService
from outswap.services.validation import errors_as_dicts

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/rentals",
    tags=["rentals"],
)

TRANSITION_RESPONSES = {
    200: {"description": "Rental status updated"},
    404: {"description": "Rental not found"},
    409: {"description": "Transition not allowed from the current status"},
}


def _transition_error(e: Exception) -> HTTPException:
    if isinstance(e, NotFoundException):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)


@router.post(
    "",
    response_model=ApiResponse[RentalResponse],
    summary="Request rental",
    description="Create a pending rental request for an outfit.",
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Rental created successfully"},
        404: {"description": "Outfit not found"},
        422: {"description": "Validation error"},
    },
)
async def create_rental(
    rental_data: RentalCreate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[RentalResponse]:
    """
    Request a rental.

    **Validation:**
    - outfitId and renterId are required
    - endDate must be after startDate
    - startDate must be in the future

    The total price is the cheaper of hourly and daily billing over the
    requested span and is fixed at creation.
    """
    rental_service = RentalService()
    try:
        rental = await rental_service.create_rental(db, rental_data)
        return ApiResponse(data=RentalResponse.model_validate(rental))
    except ValidationException as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error": e.message, "errors": errors_as_dicts(e.errors)},
        ) from e
    except NotFoundException as e:
        logger.warning(f"Rental creation failed: {e.message} ({rental_data.outfit_id})")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=e.message
        ) from e


@router.post(
    "/{rental_id}/confirm",
    response_model=ApiResponse[RentalResponse],
    summary="Confirm rental",
    status_code=status.HTTP_200_OK,
    responses=TRANSITION_RESPONSES,
)
async def confirm_rental(
    rental_id: str,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[RentalResponse]:
    """Owner accepts a pending rental."""
    rental_service = RentalService()
    try:
        rental = await rental_service.confirm_rental(db, rental_id)
    except (NotFoundException, InvalidStateException) as e:
        raise _transition_error(e) from e
    return ApiResponse(data=RentalResponse.model_validate(rental))


@router.post(
    "/{rental_id}/activate",
    response_model=ApiResponse[RentalResponse],
    summary="Activate rental",
    description="Move a confirmed rental to active once its start date has arrived.",
    status_code=status.HTTP_200_OK,
    responses=TRANSITION_RESPONSES,
)
async def activate_rental(
    rental_id: str,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[RentalResponse]:
    rental_service = RentalService()
    try:
        rental = await rental_service.activate_rental(db, rental_id)
    except (NotFoundException, InvalidStateException) as e:
        raise _transition_error(e) from e
    return ApiResponse(data=RentalResponse.model_validate(rental))


@router.post(
    "/{rental_id}/return",
    response_model=ApiResponse[RentalResponse],
    summary="Return rental",
    status_code=status.HTTP_200_OK,
    responses=TRANSITION_RESPONSES,
)
async def return_rental(
    rental_id: str,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[RentalResponse]:
    rental_service = RentalService()
    try:
        rental = await rental_service.return_rental(db, rental_id)
    except (NotFoundException, InvalidStateException) as e:
        raise _transition_error(e) from e
    return ApiResponse(data=RentalResponse.model_validate(rental))


@router.post(
    "/{rental_id}/cancel",
    response_model=ApiResponse[RentalResponse],
    summary="Cancel rental",
    description="Cancel a rental from any status, with an optional reason.",
    status_code=status.HTTP_200_OK,
    responses=TRANSITION_RESPONSES,
)
async def cancel_rental(
    rental_id: str,
    cancel_data: Optional[RentalCancel] = Body(None),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[RentalResponse]:
    rental_service = RentalService()
    reason = cancel_data.reason if cancel_data else None
    try:
        rental = await rental_service.cancel_rental(db, rental_id, reason)
    except (NotFoundException, InvalidStateException) as e:
        raise _transition_error(e) from e
    return ApiResponse(data=RentalResponse.model_validate(rental))


@router.get(
    "/renter/{user_id}",
    response_model=ApiResponse[List[RentalResponse]],
    summary="Get rentals by renter",
    status_code=status.HTTP_200_OK,
)
async def get_rentals_by_renter(
    user_id: str,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[List[RentalResponse]]:
    rental_service = RentalService()
    rentals = await rental_service.get_rentals_by_renter(db, user_id)
    logger.info(f"Retrieved {len(rentals)} rentals for renter {user_id}")
    return ApiResponse(data=[RentalResponse.model_validate(rental) for rental in rentals])


@router.get(
    "/owner/{user_id}",
    response_model=ApiResponse[List[RentalResponse]],
    summary="Get rentals by owner",
    status_code=status.HTTP_200_OK,
)
async def get_rentals_by_owner(
    user_id: str,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[List[RentalResponse]]:
    rental_service = RentalService()
    rentals = await rental_service.get_rentals_by_owner(db, user_id)
    logger.info(f"Retrieved {len(rentals)} rentals for owner {user_id}")
    return ApiResponse(data=[RentalResponse.model_validate(rental) for rental in rentals])


@router.get(
    "/{rental_id}",
    response_model=ApiResponse[RentalResponse],
    summary="Get rental",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Rental retrieved successfully"},
        404: {"description": "Rental not found"},
    },
)
async def get_rental(
    rental_id: str,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[RentalResponse]:
    rental_service = RentalService()
    rental = await rental_service.get_rental(db, rental_id)
    if not rental:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Rental not found"
        )
    return ApiResponse(data=RentalResponse.model_validate(rental))
