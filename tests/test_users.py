"""User registration and profile update tests."""

import pytest

from outswap.api.v1.schemas.user import UserCreate, UserUpdate
from outswap.core.exceptions import ConflictException, NotFoundException, ValidationException
from outswap.services.user import UserService


async def register(session, name="Ana", email="ana@example.com"):
    return await UserService().create_user(session, UserCreate(name=name, email=email))


async def test_duplicate_email_is_a_conflict(session):
    await register(session)
    with pytest.raises(ConflictException) as exc_info:
        await register(session, name="Ana Again", email="ANA@example.com")
    assert exc_info.value.field == "email"


async def test_update_changes_only_supplied_fields(session):
    user = await register(session)
    updated = await UserService().update_user(
        session, user.id, UserUpdate(phone="+1 415 555 0100")
    )
    assert updated.phone == "+1 415 555 0100"
    assert (updated.name, updated.email) == ("Ana", "ana@example.com")


async def test_update_to_another_users_email_is_a_conflict(session):
    user = await register(session)
    await register(session, name="Bo", email="bo@example.com")
    with pytest.raises(ConflictException):
        await UserService().update_user(session, user.id, UserUpdate(email="Bo@Example.com"))


async def test_update_validates_merged_profile(session):
    user = await register(session)
    with pytest.raises(ValidationException) as exc_info:
        await UserService().update_user(session, user.id, UserUpdate(email="not-an-email"))
    assert [error.field for error in exc_info.value.errors] == ["email"]


async def test_update_unknown_user_is_not_found(session):
    with pytest.raises(NotFoundException):
        await UserService().update_user(session, "ghost", UserUpdate(name="Ghost"))
