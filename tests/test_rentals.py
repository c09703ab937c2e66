"""Rental creation and status machine tests."""

import asyncio
from datetime import timedelta

import pytest

from outswap.api.v1.schemas.rental import RentalCreate
from outswap.core.exceptions import InvalidStateException, NotFoundException, ValidationException
from outswap.models.rental import RentalStatus
from outswap.services.rental import RentalService

from tests.factories import BASE_TIME, make_outfit

NOW = BASE_TIME


@pytest.fixture
async def outfit(session):
    outfit = make_outfit(0, owner_id="owner-7", price_per_hour=5.0, price_per_day=50.0)
    session.add(outfit)
    await session.commit()
    return outfit


async def create_rental(session, outfit_id="outfit0000", hours=3, starts_in=timedelta(days=1)):
    start = NOW + starts_in
    return await RentalService().create_rental(
        session,
        RentalCreate(
            outfit_id=outfit_id,
            renter_id="renter-1",
            start_date=start,
            end_date=start + timedelta(hours=hours),
        ),
        now=NOW,
    )


async def test_new_rental_is_pending_with_fixed_price(session, outfit):
    rental = await create_rental(session, hours=3)
    assert rental.status == RentalStatus.PENDING.value
    assert rental.owner_id == "owner-7"
    assert rental.total_price == 15.0

    long_rental = await create_rental(session, hours=30)
    assert long_rental.total_price == 100.0


async def test_rental_for_missing_outfit_is_not_found(session):
    with pytest.raises(NotFoundException):
        await create_rental(session, outfit_id="missing")


async def test_rental_starting_in_the_past_is_rejected(session, outfit):
    with pytest.raises(ValidationException) as exc_info:
        await create_rental(session, starts_in=-timedelta(hours=2))
    assert [error.field for error in exc_info.value.errors] == ["startDate"]


async def test_confirm_only_from_pending(session, outfit):
    service = RentalService()
    rental = await create_rental(session)

    confirmed = await service.confirm_rental(session, rental.id)
    assert confirmed.status == RentalStatus.CONFIRMED.value

    with pytest.raises(InvalidStateException) as exc_info:
        await service.confirm_rental(session, rental.id)
    assert exc_info.value.current_status == RentalStatus.CONFIRMED.value


async def test_full_lifecycle(session, outfit):
    service = RentalService()
    rental = await create_rental(session)

    await service.confirm_rental(session, rental.id)
    active = await service.activate_rental(session, rental.id, now=NOW + timedelta(days=2))
    assert active.status == RentalStatus.ACTIVE.value
    returned = await service.return_rental(session, rental.id)
    assert returned.status == RentalStatus.RETURNED.value


async def test_activation_waits_for_start_date(session, outfit):
    service = RentalService()
    rental = await create_rental(session, starts_in=timedelta(days=1))
    await service.confirm_rental(session, rental.id)

    with pytest.raises(InvalidStateException) as exc_info:
        await service.activate_rental(session, rental.id, now=NOW)
    assert "start date" in exc_info.value.message

    refreshed = await service.get_rental(session, rental.id)
    assert refreshed.status == RentalStatus.CONFIRMED.value


async def test_activation_requires_confirmation(session, outfit):
    rental = await create_rental(session)
    with pytest.raises(InvalidStateException):
        await RentalService().activate_rental(session, rental.id, now=NOW + timedelta(days=2))


async def test_return_requires_active(session, outfit):
    service = RentalService()
    rental = await create_rental(session)
    await service.confirm_rental(session, rental.id)
    with pytest.raises(InvalidStateException):
        await service.return_rental(session, rental.id)


@pytest.mark.parametrize("steps", [[], ["confirm"], ["confirm", "activate"]])
async def test_cancel_from_any_status(session, outfit, steps):
    service = RentalService()
    rental = await create_rental(session)
    for step in steps:
        if step == "confirm":
            await service.confirm_rental(session, rental.id)
        else:
            await service.activate_rental(session, rental.id, now=NOW + timedelta(days=2))

    cancelled = await service.cancel_rental(session, rental.id, reason="Plans changed")
    assert cancelled.status == RentalStatus.CANCELLED.value
    assert cancelled.cancel_reason == "Plans changed"


async def test_transition_on_unknown_rental_is_not_found(session):
    service = RentalService()
    with pytest.raises(NotFoundException):
        await service.confirm_rental(session, "nope")
    with pytest.raises(NotFoundException):
        await service.cancel_rental(session, "nope")


async def test_rentals_by_renter_and_owner(session, outfit):
    service = RentalService()
    rental = await create_rental(session)
    assert [r.id for r in await service.get_rentals_by_renter(session, "renter-1")] == [rental.id]
    assert [r.id for r in await service.get_rentals_by_owner(session, "owner-7")] == [rental.id]
    assert await service.get_rentals_by_owner(session, "renter-1") == []


async def test_simultaneous_confirms_let_exactly_one_through(database, session, outfit):
    rental = await create_rental(session)
    await session.commit()

    async def confirm():
        async with database.session() as db:
            return await RentalService().confirm_rental(db, rental.id)

    results = await asyncio.gather(confirm(), confirm(), return_exceptions=True)

    confirmed = [r for r in results if not isinstance(r, Exception)]
    rejected = [r for r in results if isinstance(r, Exception)]
    assert len(confirmed) == 1
    assert confirmed[0].status == RentalStatus.CONFIRMED.value
    assert len(rejected) == 1
    assert isinstance(rejected[0], InvalidStateException)
    assert rejected[0].current_status == RentalStatus.CONFIRMED.value
