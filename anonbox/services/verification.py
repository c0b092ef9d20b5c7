"""Account verification with the emailed code."""

from datetime import datetime
from enum import Enum
from urllib.parse import unquote

from anonbox.core.exceptions import CodeExpiredError, InvalidCodeError, NotFoundError
from anonbox.core.logging import get_logger
from anonbox.core.security import codes_match
from anonbox.models.user import User

log = get_logger(__name__)


class CodeCheck(str, Enum):
    OK = "ok"
    EXPIRED = "expired"
    INVALID = "invalid"


def check_code(user: User, code: str, now: datetime | None = None) -> CodeCheck:
    """Wrong code is always INVALID; a right code past its expiry is EXPIRED."""
    now = now or datetime.utcnow()
    if not codes_match(code, user.verify_code):
        return CodeCheck.INVALID
    expiry = user.verify_code_expiry
    if expiry is None or expiry <= now:
        return CodeCheck.EXPIRED
    return CodeCheck.OK


async def verify_code(username: str, code: str, now: datetime | None = None) -> User:
    """Mark the user verified when the code matches and has not expired.

    The stored code is left in place, so repeating a still-valid code
    succeeds again without changing anything.
    """
    decoded = unquote(username)
    user = await User.find_one(User.username == decoded)
    if not user:
        raise NotFoundError("User not found")

    result = check_code(user, code, now=now)
    if result is CodeCheck.INVALID:
        log.info("verify_code_rejected", user_id=str(user.id), reason="invalid")
        raise InvalidCodeError()
    if result is CodeCheck.EXPIRED:
        log.info("verify_code_rejected", user_id=str(user.id), reason="expired")
        raise CodeExpiredError()

    if not user.is_verified:
        await user.set({User.is_verified: True, User.updated_at: datetime.utcnow()})
        log.info("user_verified", user_id=str(user.id), username=user.username)
    return user
