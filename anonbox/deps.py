"""Shared FastAPI dependencies."""

from beanie import PydanticObjectId
from bson.errors import InvalidId
from fastapi import Request
from pydantic import BaseModel

from anonbox.core.exceptions import UnauthorizedError
from anonbox.core.logging import bind_user
from anonbox.core.security import load_session_cookie
from anonbox.db.init import init_db

SESSION_COOKIE_NAME = "anonbox_session"


class AuthContext(BaseModel):
    """Identity of the signed-in caller, taken from the session cookie."""

    user_id: PydanticObjectId


async def use_db() -> None:
    """Dependency: make sure the shared database handle is ready."""
    await init_db()


async def get_auth_context(request: Request) -> AuthContext:
    """Dependency: fail closed unless a valid session cookie is present."""
    cookie = request.cookies.get(SESSION_COOKIE_NAME)
    if not cookie:
        raise UnauthorizedError("Not authenticated")
    payload = load_session_cookie(cookie)
    if not payload:
        raise UnauthorizedError("Not authenticated")
    user_id = payload.get("user_id")
    if not user_id:
        raise UnauthorizedError("Not authenticated")
    try:
        oid = PydanticObjectId(user_id)
    except (InvalidId, TypeError):
        raise UnauthorizedError("Not authenticated")
    bind_user(str(oid), payload.get("username") or "")
    return AuthContext(user_id=oid)
