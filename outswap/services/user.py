"""
User service: registration, lookup and profile updates of marketplace members.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from outswap.api.v1.schemas.user import UserCreate, UserUpdate
from outswap.core.exceptions import ConflictException, NotFoundException, ValidationException
from outswap.models.user import User
from outswap.services.validation import validate_user_input

logger = logging.getLogger(__name__)

# Fields a client may never overwrite through a profile update
PROTECTED_FIELDS = {"id", "created_at", "rating", "total_ratings"}


def _duplicate_email(email: str) -> ConflictException:
    return ConflictException(f"A user with email {email} already exists", field="email")


class UserService:
    """Service for managing users"""

    async def get_user(self, db: AsyncSession, user_id: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def _email_taken(
        self, db: AsyncSession, email: str, exclude_id: Optional[str] = None
    ) -> bool:
        query = select(User.id).where(User.email == email)
        if exclude_id:
            query = query.where(User.id != exclude_id)
        result = await db.execute(query)
        return result.first() is not None

    async def _flush_user(self, db: AsyncSession, email: str) -> None:
        try:
            await db.flush()
        except IntegrityError as e:
            await db.rollback()
            logger.error("Failed to save user due to database error", exc_info=True)
            raise _duplicate_email(email) from e

    async def create_user(self, db: AsyncSession, user_data: UserCreate) -> User:
        """
        Create a new user.

        Raises:
            ValidationException: If name, email or phone is invalid
            ConflictException: If the email is already registered
        """
        validation = validate_user_input(user_data.model_dump())
        if not validation.is_valid:
            raise ValidationException(validation.errors)

        email = user_data.email.strip().lower()
        if await self._email_taken(db, email):
            raise _duplicate_email(email)

        user = User(
            name=user_data.name.strip(),
            email=email,
            phone=user_data.phone,
            location=user_data.location.model_dump(mode="json") if user_data.location else None,
            rating=0.0,
            total_ratings=0,
        )
        db.add(user)
        await self._flush_user(db, email)
        logger.info(f"Created user {user.id}")
        return user

    async def update_user(self, db: AsyncSession, user_id: str, user_data: UserUpdate) -> User:
        """
        Update a user's profile (partial update).

        The merged profile must still pass user validation. id, createdAt,
        rating and totalRatings are ignored when supplied.

        Raises:
            NotFoundException: If the user does not exist
            ValidationException: If the merged profile is invalid
            ConflictException: If the new email belongs to another user
        """
        user = await self.get_user(db, user_id)
        if not user:
            raise NotFoundException("User", user_id)

        changes = {
            key: value
            for key, value in user_data.model_dump(exclude_unset=True).items()
            if key not in PROTECTED_FIELDS
        }
        if not changes:
            return user

        merged = {
            "name": user.name,
            "email": user.email,
            "phone": user.phone,
            **changes,
        }
        validation = validate_user_input(merged)
        if not validation.is_valid:
            logger.warning(f"Rejected update of user {user_id}: {len(validation.errors)} validation error(s)")
            raise ValidationException(validation.errors)

        if "email" in changes:
            email = changes["email"].strip().lower()
            if await self._email_taken(db, email, exclude_id=user_id):
                raise _duplicate_email(email)
            user.email = email
        if "name" in changes:
            user.name = changes["name"].strip()
        if "phone" in changes:
            user.phone = changes["phone"]
        if "location" in changes:
            location = user_data.location
            user.location = location.model_dump(mode="json") if location else None

        await self._flush_user(db, user.email)
        logger.info(f"Updated user {user_id} fields: {sorted(changes)}")
        return user
