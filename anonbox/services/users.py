"""Accounts: sign-up, sign-in, username availability and message preference."""

from datetime import datetime, timedelta

from beanie import PydanticObjectId
from beanie.operators import Or

from anonbox.core.config import get_settings
from anonbox.core.exceptions import BadRequestError, ForbiddenError, NotFoundError, UnauthorizedError
from anonbox.core.logging import get_logger
from anonbox.core.security import generate_verify_code, hash_password, verify_password
from anonbox.core.validation import username_errors
from anonbox.models.user import User
from anonbox.services.mailer import send_verification_email

log = get_logger(__name__)


async def get_user(user_id: PydanticObjectId) -> User:
    user = await User.get(user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


async def is_username_available(username: str) -> bool:
    """True unless a verified user already holds exactly this username."""
    existing = await User.find_one(User.username == username, User.is_verified == True)  # noqa: E712
    return existing is None


async def check_username_unique(username: str | None) -> tuple[bool, str]:
    """Validate the candidate and look for a verified holder.

    Raises BadRequestError with the joined rule violations when the candidate
    is malformed; otherwise returns (available, message).
    """
    errors = username_errors(username)
    if errors:
        raise BadRequestError(", ".join(errors), details={"username": errors}, code="INVALID_USERNAME")
    if await is_username_available(username):
        return True, "Username is unique"
    return False, "Username is already taken"


async def sign_up(username: str, email: str, password: str) -> User:
    """Register or re-register an unverified account and mail a fresh code."""
    if not await is_username_available(username):
        raise BadRequestError("Username is already taken", code="USERNAME_TAKEN")

    settings = get_settings()
    verify_code = generate_verify_code()
    expiry = datetime.utcnow() + timedelta(minutes=settings.verify_code_ttl_minutes)
    password_hash = hash_password(password)

    by_email = await User.find_one(User.email == email)
    by_username = await User.find_one(User.username == username)
    if by_email and by_email.is_verified:
        raise BadRequestError("User already exists with this email", code="EMAIL_TAKEN")
    if by_email and by_username and by_email.id != by_username.id:
        # another pending account still holds the username
        raise BadRequestError("Username is already taken", code="USERNAME_TAKEN")

    user = by_email or by_username
    if user:
        user.username = username
        user.email = email
        user.password_hash = password_hash
        user.verify_code = verify_code
        user.verify_code_expiry = expiry
        user.updated_at = datetime.utcnow()
        await user.save()
        log.info("user_reregistered", user_id=str(user.id), username=username)
    else:
        user = User(
            username=username,
            email=email,
            password_hash=password_hash,
            verify_code=verify_code,
            verify_code_expiry=expiry,
        )
        await user.insert()
        log.info("user_signed_up", user_id=str(user.id), username=username)

    await send_verification_email(email, username, verify_code)
    return user


async def authenticate(identifier: str, password: str) -> User:
    """Sign in with email or username."""
    user = await User.find_one(Or(User.email == identifier, User.username == identifier))
    if not user:
        raise UnauthorizedError("Invalid credentials")
    if not user.is_verified:
        raise ForbiddenError("Please verify your account before logging in")
    if not verify_password(password, user.password_hash):
        log.info("sign_in_failed", user_id=str(user.id))
        raise UnauthorizedError("Invalid credentials")
    log.info("user_signed_in", user_id=str(user.id))
    return user


def session_payload_for_user(user: User) -> dict:
    return {"user_id": str(user.id), "username": user.username}


async def get_accepting_messages(user_id: PydanticObjectId) -> bool:
    user = await get_user(user_id)
    return user.is_accepting_messages


async def set_accepting_messages(user_id: PydanticObjectId, value: bool) -> User:
    """Persist the flag and return the updated user."""
    user = await get_user(user_id)
    await user.set({User.is_accepting_messages: value, User.updated_at: datetime.utcnow()})
    log.info("accepting_messages_updated", user_id=str(user_id), value=value)
    return user
