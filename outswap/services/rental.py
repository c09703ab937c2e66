"""
Rental service: creation and lifecycle transitions.

Lifecycle:
    pending -> confirmed -> active -> returned
    any status -> cancelled

Every transition is a single conditional UPDATE matching both the rental id
and the allowed current statuses, so two concurrent transitions on the same
rental cannot both succeed. When nothing matched, the rental is re-read to
tell "not found" apart from "wrong status".
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from outswap.api.v1.schemas.rental import RentalCreate
from outswap.core.clock import as_utc, utcnow
from outswap.core.exceptions import (
    InvalidStateException,
    NotFoundException,
    ValidationException,
)
from outswap.models.outfit import Outfit
from outswap.models.rental import Rental, RentalStatus
from outswap.services.pricing import calculate_price
from outswap.services.validation import validate_rental_input

logger = logging.getLogger(__name__)


class RentalService:
    """Service for rentals and their status machine"""

    async def get_rental(self, db: AsyncSession, rental_id: str) -> Optional[Rental]:
        result = await db.execute(select(Rental).where(Rental.id == rental_id))
        return result.scalar_one_or_none()

    async def get_rentals_by_renter(self, db: AsyncSession, renter_id: str) -> List[Rental]:
        """Get rentals requested by a user, newest first."""
        result = await db.execute(
            select(Rental)
            .where(Rental.renter_id == renter_id)
            .order_by(Rental.created_at.desc(), Rental.id)
        )
        return list(result.scalars().all())

    async def get_rentals_by_owner(self, db: AsyncSession, owner_id: str) -> List[Rental]:
        """Get rentals of a user's outfits, newest first."""
        result = await db.execute(
            select(Rental)
            .where(Rental.owner_id == owner_id)
            .order_by(Rental.created_at.desc(), Rental.id)
        )
        return list(result.scalars().all())

    async def create_rental(
        self,
        db: AsyncSession,
        rental_data: RentalCreate,
        now: Optional[datetime] = None,
    ) -> Rental:
        """
        Create a rental request in pending status.

        The owner is copied from the outfit and the total price is computed
        once here; neither changes afterwards.

        Args:
            db: Database session
            rental_data: Requested outfit, renter and date span
            now: Reference time for the future-start rule (defaults to now)

        Returns:
            Created rental

        Raises:
            ValidationException: If the request breaks a business rule
            NotFoundException: If the outfit does not exist
        """
        validation = validate_rental_input(rental_data.model_dump(), now=now)
        if not validation.is_valid:
            logger.warning(
                f"Rejected rental request for outfit {rental_data.outfit_id}: "
                f"{len(validation.errors)} validation error(s)"
            )
            raise ValidationException(validation.errors)

        result = await db.execute(select(Outfit).where(Outfit.id == rental_data.outfit_id))
        outfit = result.scalar_one_or_none()
        if not outfit:
            raise NotFoundException("Outfit", rental_data.outfit_id)

        start_date = as_utc(rental_data.start_date)
        end_date = as_utc(rental_data.end_date)
        total_price = calculate_price(
            start_date, end_date, outfit.price_per_hour, outfit.price_per_day
        )

        rental = Rental(
            outfit_id=outfit.id,
            renter_id=rental_data.renter_id,
            owner_id=outfit.owner_id,
            start_date=start_date,
            end_date=end_date,
            total_price=total_price,
            status=RentalStatus.PENDING.value,
            notes=rental_data.notes,
        )
        db.add(rental)
        await db.flush()
        logger.info(
            f"Created rental {rental.id} for outfit {outfit.id} by renter {rental.renter_id} "
            f"({start_date.isoformat()} -> {end_date.isoformat()}, total {total_price})"
        )
        return rental

    async def confirm_rental(self, db: AsyncSession, rental_id: str) -> Rental:
        """Owner accepts a pending rental."""
        return await self._transition(
            db, rental_id, "confirm", RentalStatus.CONFIRMED, allowed_from=[RentalStatus.PENDING]
        )

    async def activate_rental(
        self, db: AsyncSession, rental_id: str, now: Optional[datetime] = None
    ) -> Rental:
        """
        Start a confirmed rental once its start date has arrived.

        Raises:
            InvalidStateException: If the rental is not confirmed or has not started yet
        """
        now = as_utc(now) if now else utcnow()
        return await self._transition(
            db,
            rental_id,
            "activate",
            RentalStatus.ACTIVE,
            allowed_from=[RentalStatus.CONFIRMED],
            conditions=[Rental.start_date <= now],
            start_gated=True,
        )

    async def return_rental(self, db: AsyncSession, rental_id: str) -> Rental:
        """Mark an active rental as returned."""
        return await self._transition(
            db, rental_id, "return", RentalStatus.RETURNED, allowed_from=[RentalStatus.ACTIVE]
        )

    async def cancel_rental(
        self, db: AsyncSession, rental_id: str, reason: Optional[str] = None
    ) -> Rental:
        """Cancel a rental from any status, recording an optional reason."""
        return await self._transition(
            db,
            rental_id,
            "cancel",
            RentalStatus.CANCELLED,
            allowed_from=None,
            values={"cancel_reason": reason},
        )

    async def _transition(
        self,
        db: AsyncSession,
        rental_id: str,
        action: str,
        target: RentalStatus,
        allowed_from: Optional[Iterable[RentalStatus]],
        conditions: Iterable = (),
        values: Optional[dict] = None,
        start_gated: bool = False,
    ) -> Rental:
        stmt = update(Rental).where(Rental.id == rental_id)
        if allowed_from is not None:
            stmt = stmt.where(Rental.status.in_([status.value for status in allowed_from]))
        for condition in conditions:
            stmt = stmt.where(condition)
        stmt = stmt.values(
            status=target.value, updated_at=utcnow(), **(values or {})
        ).execution_options(synchronize_session=False)

        result = await db.execute(stmt)
        if result.rowcount == 0:
            current = await self._reload(db, rental_id)
            if current is None:
                logger.warning(f"Cannot {action} rental {rental_id}: not found")
                raise NotFoundException("Rental", rental_id)
            if (
                start_gated
                and current.status in {status.value for status in allowed_from or []}
            ):
                logger.warning(f"Cannot {action} rental {rental_id}: start date not reached")
                raise InvalidStateException(
                    "Rental cannot be activated before its start date", current.status
                )
            logger.warning(f"Cannot {action} rental {rental_id} from status '{current.status}'")
            raise InvalidStateException(
                f"Cannot {action} a rental in '{current.status}' status", current.status
            )

        await db.flush()
        rental = await self._reload(db, rental_id)
        logger.info(f"Rental {rental_id} -> {target.value} ({action})")
        return rental

    @staticmethod
    async def _reload(db: AsyncSession, rental_id: str) -> Optional[Rental]:
        # populate_existing refreshes any copy already in the identity map
        result = await db.execute(
            select(Rental)
            .where(Rental.id == rental_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()
