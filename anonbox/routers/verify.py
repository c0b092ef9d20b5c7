from fastapi import APIRouter
from pydantic import BaseModel

from anonbox.services import verification as verification_service

router = APIRouter()


class VerifyCodeRequest(BaseModel):
    username: str
    code: str


@router.post("/verify-code")
async def verify_code(body: VerifyCodeRequest):
    """Verify account with the emailed code (username may be percent-encoded)."""
    await verification_service.verify_code(body.username, body.code)
    return {"success": True, "message": "Account verified successfully"}
