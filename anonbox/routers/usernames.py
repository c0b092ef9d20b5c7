from fastapi import APIRouter, Query

from anonbox.services import users as user_service

router = APIRouter()


@router.get("/check-username-unique")
async def check_username_unique(username: str | None = Query(None)):
    """200 either way for a well-formed name; 400 when it breaks the sign-up rules."""
    available, message = await user_service.check_username_unique(username)
    return {"success": available, "message": message}
