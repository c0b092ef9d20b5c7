"""Accounts: sign-up, sign-in, availability, message preference."""

from datetime import datetime

import pytest
from beanie import PydanticObjectId

from anonbox.core.exceptions import BadRequestError, ForbiddenError, NotFoundError, UnauthorizedError
from anonbox.core.security import verify_password
from anonbox.models.user import User
from anonbox.services import users as user_service

pytestmark = pytest.mark.asyncio


async def test_username_available_when_nobody_holds_it(db):
    assert await user_service.check_username_unique("alice") == (True, "Username is unique")


async def test_username_taken_by_verified_user(make_user):
    await make_user(username="alice")
    assert await user_service.check_username_unique("alice") == (False, "Username is already taken")


async def test_unverified_holder_does_not_block(make_user):
    await make_user(username="alice", is_verified=False)
    available, _ = await user_service.check_username_unique("alice")
    assert available is True


async def test_username_check_is_case_sensitive(make_user):
    await make_user(username="alice")
    available, _ = await user_service.check_username_unique("Alice")
    assert available is True


async def test_username_check_rejects_malformed(db):
    with pytest.raises(BadRequestError) as exc:
        await user_service.check_username_unique("a!")
    assert exc.value.message == "Username must not contain special characters"
    with pytest.raises(BadRequestError):
        await user_service.check_username_unique(None)


async def test_sign_up_creates_unverified_user(db):
    before = datetime.utcnow()
    user = await user_service.sign_up("alice", "alice@example.com", "secret1")
    stored = await User.get(user.id)
    assert stored.is_verified is False
    assert stored.is_accepting_messages is True
    assert stored.messages == []
    assert len(stored.verify_code) == 6
    assert stored.verify_code_expiry > before
    assert verify_password("secret1", stored.password_hash)


async def test_sign_up_rejects_verified_username(make_user):
    await make_user(username="alice")
    with pytest.raises(BadRequestError) as exc:
        await user_service.sign_up("alice", "other@example.com", "secret1")
    assert exc.value.code == "USERNAME_TAKEN"


async def test_sign_up_rejects_verified_email(make_user):
    await make_user(username="alice", email="alice@example.com")
    with pytest.raises(BadRequestError) as exc:
        await user_service.sign_up("alice2", "alice@example.com", "secret1")
    assert exc.value.code == "EMAIL_TAKEN"


async def test_sign_up_reuses_unverified_record(make_user):
    old = await make_user(username="alice", email="alice@example.com", is_verified=False, verify_code="111111")
    user = await user_service.sign_up("alice", "alice@example.com", "newpass1")
    assert user.id == old.id
    assert await User.find(User.username == "alice").count() == 1
    stored = await User.get(old.id)
    assert stored.verify_code != "" and verify_password("newpass1", stored.password_hash)


async def test_sign_up_takes_over_unverified_username(make_user):
    old = await make_user(username="alice", email="first@example.com", is_verified=False)
    user = await user_service.sign_up("alice", "second@example.com", "secret1")
    assert user.id == old.id
    stored = await User.get(old.id)
    assert stored.email == "second@example.com"


async def test_authenticate_by_username_or_email(make_user):
    user = await make_user(username="alice", email="alice@example.com", password="secret1")
    assert (await user_service.authenticate("alice", "secret1")).id == user.id
    assert (await user_service.authenticate("alice@example.com", "secret1")).id == user.id


async def test_authenticate_failures(make_user):
    await make_user(username="alice", password="secret1")
    await make_user(username="bob", password="secret1", is_verified=False)
    with pytest.raises(UnauthorizedError):
        await user_service.authenticate("alice", "wrong")
    with pytest.raises(UnauthorizedError):
        await user_service.authenticate("nobody", "secret1")
    with pytest.raises(ForbiddenError):
        await user_service.authenticate("bob", "secret1")


async def test_accepting_messages_roundtrip(make_user):
    user = await make_user()
    assert await user_service.get_accepting_messages(user.id) is True
    updated = await user_service.set_accepting_messages(user.id, False)
    assert updated.is_accepting_messages is False
    assert await user_service.get_accepting_messages(user.id) is False
    # repeated identical set is a no-op
    await user_service.set_accepting_messages(user.id, False)
    assert await user_service.get_accepting_messages(user.id) is False
    await user_service.set_accepting_messages(user.id, True)
    assert await user_service.get_accepting_messages(user.id) is True


async def test_accepting_messages_unknown_user(db):
    with pytest.raises(NotFoundError):
        await user_service.get_accepting_messages(PydanticObjectId())
    with pytest.raises(NotFoundError):
        await user_service.set_accepting_messages(PydanticObjectId(), True)
