"""
Routes for marketplace users
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from outswap.api.v1.schemas.common import ApiResponse
from outswap.api.v1.schemas.user import UserCreate, UserResponse, UserUpdate
from outswap.core.database import get_db
from outswap.core.exceptions import ConflictException, NotFoundException, ValidationException
from outswap.services.user import UserService
from outswap.services.validation import errors_as_dicts

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/users",
    tags=["users"],
)


@router.post(
    "",
    response_model=ApiResponse[UserResponse],
    summary="Create user",
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "User created successfully"},
        409: {"description": "Email already registered"},
        422: {"description": "Validation error"},
    },
)
async def create_user(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[UserResponse]:
    """
    Create a new user

    **Validation:**
    - name 1-100 characters
    - email must be a valid address and not already registered
    - phone, when given, at least 10 digits/separators
    """
    user_service = UserService()
    try:
        user = await user_service.create_user(db, user_data)
        return ApiResponse(data=UserResponse.model_validate(user))
    except ValidationException as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error": e.message, "errors": errors_as_dicts(e.errors)},
        ) from e
    except ConflictException as e:
        logger.warning(f"User creation failed: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail=e.message
        ) from e


@router.get(
    "/{user_id}",
    response_model=ApiResponse[UserResponse],
    summary="Get user",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "User retrieved successfully"},
        404: {"description": "User not found"},
    },
)
async def get_user(
    user_id: str,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[UserResponse]:
    user_service = UserService()
    user = await user_service.get_user(db, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User not found"
        )
    return ApiResponse(data=UserResponse.model_validate(user))


@router.put(
    "/{user_id}",
    response_model=ApiResponse[UserResponse],
    summary="Update user profile",
    description="Partial update; id, createdAt, rating and totalRatings cannot be changed.",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "User updated successfully"},
        404: {"description": "User not found"},
        409: {"description": "Email already registered"},
        422: {"description": "Validation error"},
    },
)
async def update_user(
    user_id: str,
    user_data: UserUpdate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[UserResponse]:
    user_service = UserService()
    try:
        user = await user_service.update_user(db, user_id, user_data)
        return ApiResponse(data=UserResponse.model_validate(user))
    except NotFoundException as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=e.message
        ) from e
    except ValidationException as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error": e.message, "errors": errors_as_dicts(e.errors)},
        ) from e
    except ConflictException as e:
        logger.warning(f"User update failed: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail=e.message
        ) from e
