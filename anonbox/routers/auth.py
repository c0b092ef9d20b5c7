from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from anonbox.core.config import get_settings
from anonbox.core.security import create_session_cookie
from anonbox.core.validation import Email, Password, Username
from anonbox.deps import SESSION_COOKIE_NAME, AuthContext, get_auth_context
from anonbox.services import users as user_service

router = APIRouter()


class SignUpRequest(BaseModel):
    username: Username
    email: Email
    password: Password


class SignInRequest(BaseModel):
    identifier: str
    password: str


@router.post("/sign-up", status_code=status.HTTP_201_CREATED)
async def sign_up(body: SignUpRequest):
    """Create (or refresh) an unverified account and email the code."""
    await user_service.sign_up(body.username, body.email, body.password)
    return {
        "success": True,
        "message": "User registered successfully. Please verify your account.",
    }


@router.post("/sign-in")
async def sign_in(body: SignInRequest, response: Response):
    """Check credentials; set httpOnly session cookie."""
    user = await user_service.authenticate(body.identifier.strip(), body.password)
    settings = get_settings()
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=create_session_cookie(user_service.session_payload_for_user(user)),
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.env == "production",
        samesite="lax",
        path="/",
    )
    return {"success": True, "message": "Signed in", "user": user.to_public()}


@router.post("/sign-out")
async def sign_out(response: Response):
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")
    return {"success": True, "message": "Signed out"}


@router.get("/me")
async def me(ctx: AuthContext = Depends(get_auth_context)):
    user = await user_service.get_user(ctx.user_id)
    return {"success": True, "user": user.to_public()}
