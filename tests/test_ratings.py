"""Rating creation and aggregate maintenance tests."""

import pytest

from outswap.api.v1.schemas.rating import RatingCreate, RatingUpdate
from outswap.core.exceptions import NotFoundException, ValidationException
from outswap.models.rating import RatingTargetType
from outswap.services.rating import RatingService

from tests.factories import make_outfit, make_user


@pytest.fixture
async def targets(session):
    outfit = make_outfit(0)
    user = make_user(0)
    session.add_all([outfit, user])
    await session.commit()
    return outfit, user


def rate(target_type, target_id, value, comment=None):
    return RatingCreate(
        target_type=target_type,
        target_id=target_id,
        rating=value,
        comment=comment,
        from_user_id="rater-1",
    )


async def test_outfit_average_and_count(session, targets):
    outfit, _ = targets
    service = RatingService()
    created = []
    for value in (5, 3, 4):
        created.append(await service.create_rating(session, rate("outfit", outfit.id, value)))

    await session.refresh(outfit)
    assert outfit.rating == 4.0
    assert outfit.total_ratings == 3

    await service.delete_rating(session, created[1].id)
    await session.refresh(outfit)
    assert outfit.rating == 4.5
    assert outfit.total_ratings == 2


async def test_user_ratings_do_not_touch_outfits(session, targets):
    outfit, user = targets
    service = RatingService()
    await service.create_rating(session, rate("user", user.id, 2))

    await session.refresh(user)
    await session.refresh(outfit)
    assert (user.rating, user.total_ratings) == (2.0, 1)
    assert (outfit.rating, outfit.total_ratings) == (0.0, 0)


async def test_update_recomputes_average(session, targets):
    outfit, _ = targets
    service = RatingService()
    first = await service.create_rating(session, rate("outfit", outfit.id, 1))
    await service.create_rating(session, rate("outfit", outfit.id, 3))

    updated = await service.update_rating(session, first.id, RatingUpdate(rating=5, comment="Better than expected"))
    assert updated.rating == 5
    assert updated.comment == "Better than expected"
    await session.refresh(outfit)
    assert outfit.rating == 4.0
    assert outfit.total_ratings == 2


async def test_deleting_last_rating_resets_aggregate(session, targets):
    outfit, _ = targets
    service = RatingService()
    rating = await service.create_rating(session, rate("outfit", outfit.id, 4))
    await service.delete_rating(session, rating.id)
    await session.refresh(outfit)
    assert (outfit.rating, outfit.total_ratings) == (0.0, 0)


async def test_ratings_for_target(session, targets):
    outfit, user = targets
    service = RatingService()
    await service.create_rating(session, rate("outfit", outfit.id, 4))
    await service.create_rating(session, rate("user", user.id, 5))

    outfit_ratings = await service.get_ratings_for_target(session, RatingTargetType.OUTFIT, outfit.id)
    assert [r.rating for r in outfit_ratings] == [4]


async def test_rating_missing_target_is_not_found(session, targets):
    with pytest.raises(NotFoundException):
        await RatingService().create_rating(session, rate("user", "ghost", 4))


@pytest.mark.parametrize("value", [0, 6, 4.5])
async def test_invalid_rating_values_are_rejected(session, targets, value):
    outfit, _ = targets
    with pytest.raises(ValidationException):
        await RatingService().create_rating(session, rate("outfit", outfit.id, value))


async def test_unknown_rating_is_not_found(session):
    service = RatingService()
    with pytest.raises(NotFoundException):
        await service.update_rating(session, "missing", RatingUpdate(rating=3))
    with pytest.raises(NotFoundException):
        await service.delete_rating(session, "missing")


async def test_blank_comment_is_stored_as_none(session, targets):
    outfit, _ = targets
    service = RatingService()
    rating = await service.create_rating(session, rate("outfit", outfit.id, 4, comment="   "))
    assert rating.comment is None

    updated = await service.update_rating(session, rating.id, RatingUpdate(comment="Great fit"))
    assert updated.comment == "Great fit"
    cleared = await service.update_rating(session, rating.id, RatingUpdate(comment=" \t"))
    assert cleared.comment is None
