"""
Rating service for outfits and users.

Each create, update or delete recomputes the target's average and count
from all of its ratings. The target row is locked (SELECT ... FOR UPDATE)
before the rating is written, so concurrent raters of the same target are
serialized and the last recomputation always sees every committed rating.

Reference: https://docs.sqlalchemy.org/en/21/orm/queryguide/query.html#sqlalchemy.orm.Query.with_for_update
"""

import logging
from typing import List, Optional, Union

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from outswap.api.v1.schemas.rating import RatingCreate, RatingUpdate
from outswap.core.clock import utcnow
from outswap.core.exceptions import NotFoundException, ValidationException
from outswap.models.outfit import Outfit
from outswap.models.rating import Rating, RatingTargetType
from outswap.models.user import User
from outswap.services.validation import (
    clean_comment,
    validate_rating_input,
    validate_rating_update,
)

logger = logging.getLogger(__name__)

RatingTarget = Union[Outfit, User]

TARGET_MODELS = {
    RatingTargetType.OUTFIT: Outfit,
    RatingTargetType.USER: User,
}


class RatingService:
    """Service for managing ratings and the aggregates they feed"""

    async def get_rating(self, db: AsyncSession, rating_id: str) -> Optional[Rating]:
        result = await db.execute(select(Rating).where(Rating.id == rating_id))
        return result.scalar_one_or_none()

    async def get_ratings_for_target(
        self, db: AsyncSession, target_type: RatingTargetType, target_id: str
    ) -> List[Rating]:
        """Get all ratings of an outfit or user, newest first."""
        result = await db.execute(
            select(Rating)
            .where(Rating.target_type == target_type.value, Rating.target_id == target_id)
            .order_by(Rating.created_at.desc(), Rating.id)
        )
        return list(result.scalars().all())

    async def create_rating(self, db: AsyncSession, rating_data: RatingCreate) -> Rating:
        """
        Create a rating and refresh the target's aggregate.

        Args:
            db: Database session
            rating_data: Target, value, comment and author

        Returns:
            Created rating

        Raises:
            ValidationException: If the rating breaks a business rule
            NotFoundException: If the rated outfit or user does not exist
        """
        validation = validate_rating_input(rating_data.model_dump())
        if not validation.is_valid:
            logger.warning(f"Rejected rating: {len(validation.errors)} validation error(s)")
            raise ValidationException(validation.errors)

        target_type = RatingTargetType(rating_data.target_type)
        target = await self._lock_target(db, target_type, rating_data.target_id)
        if target is None:
            raise NotFoundException(target_type.value.capitalize(), rating_data.target_id)

        rating = Rating(
            target_type=target_type.value,
            target_id=rating_data.target_id,
            rating=int(rating_data.rating),
            comment=clean_comment(rating_data.comment),
            from_user_id=rating_data.from_user_id,
            rental_id=rating_data.rental_id,
        )
        db.add(rating)
        await db.flush()
        await self._refresh_aggregate(db, target_type, target)
        logger.info(
            f"Created rating {rating.id} ({rating.rating}) for {target_type.value} "
            f"{rating.target_id} by user {rating.from_user_id}"
        )
        return rating

    async def update_rating(
        self, db: AsyncSession, rating_id: str, rating_data: RatingUpdate
    ) -> Rating:
        """
        Update a rating's value and/or comment.

        The target aggregate is recomputed when the value changes.

        Raises:
            ValidationException: If a supplied field is invalid
            NotFoundException: If the rating does not exist
        """
        changes = rating_data.model_dump(exclude_unset=True)
        validation = validate_rating_update(changes)
        if not validation.is_valid:
            logger.warning(f"Rejected update of rating {rating_id}: {len(validation.errors)} validation error(s)")
            raise ValidationException(validation.errors)

        rating = await self.get_rating(db, rating_id)
        if not rating:
            raise NotFoundException("Rating", rating_id)
        if not changes:
            return rating

        target_type = RatingTargetType(rating.target_type)
        target = await self._lock_target(db, target_type, rating.target_id)

        if "rating" in changes:
            rating.rating = int(changes["rating"])
        if "comment" in changes:
            rating.comment = clean_comment(changes["comment"])
        rating.updated_at = utcnow()
        await db.flush()

        if "rating" in changes and target is not None:
            await self._refresh_aggregate(db, target_type, target)
        logger.info(f"Updated rating {rating_id} fields: {sorted(changes)}")
        return rating

    async def delete_rating(self, db: AsyncSession, rating_id: str) -> None:
        """
        Delete a rating and refresh the target's aggregate.

        Raises:
            NotFoundException: If the rating does not exist
        """
        rating = await self.get_rating(db, rating_id)
        if not rating:
            raise NotFoundException("Rating", rating_id)

        target_type = RatingTargetType(rating.target_type)
        target = await self._lock_target(db, target_type, rating.target_id)

        await db.delete(rating)
        await db.flush()
        if target is not None:
            await self._refresh_aggregate(db, target_type, target)
        logger.info(f"Deleted rating {rating_id}")

    @staticmethod
    async def _lock_target(
        db: AsyncSession, target_type: RatingTargetType, target_id: str
    ) -> Optional[RatingTarget]:
        """Load the rated outfit or user with a row lock held until commit."""
        model = TARGET_MODELS[target_type]
        result = await db.execute(
            select(model)
            .where(model.id == target_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def _refresh_aggregate(
        db: AsyncSession, target_type: RatingTargetType, target: RatingTarget
    ) -> None:
        """Recompute mean and count from all ratings of the target."""
        result = await db.execute(
            select(func.avg(Rating.rating), func.count(Rating.id)).where(
                Rating.target_type == target_type.value,
                Rating.target_id == target.id,
            )
        )
        average, count = result.one()
        target.rating = float(average) if count else 0.0
        target.total_ratings = count
        await db.flush()
        logger.debug(
            f"{target_type.value} {target.id} rating is now {target.rating:.2f} over {count} rating(s)"
        )
