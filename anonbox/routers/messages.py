from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field, StrictBool

from anonbox.deps import AuthContext, get_auth_context
from anonbox.services import messages as message_service
from anonbox.services import users as user_service

router = APIRouter()


class SendMessageRequest(BaseModel):
    username: str
    content: str


class AcceptMessagesRequest(BaseModel):
    accept_messages: StrictBool = Field(alias="acceptMessages")


@router.post("/send-message", status_code=status.HTTP_201_CREATED)
async def send_message(body: SendMessageRequest):
    """Anonymous: no session needed, no sender recorded."""
    await message_service.send_message(body.username, body.content)
    return {"success": True, "message": "Message sent successfully"}


@router.get("/get-messages")
async def get_messages(ctx: AuthContext = Depends(get_auth_context)):
    """Current user's messages, newest first."""
    messages = await message_service.get_messages(ctx.user_id)
    return {"success": True, "messages": [m.to_public() for m in messages]}


@router.delete("/delete-message/{message_id}")
async def delete_message(message_id: str, ctx: AuthContext = Depends(get_auth_context)):
    await message_service.delete_message(ctx.user_id, message_id)
    return {"success": True, "message": "Message deleted"}


@router.post("/accept-messages")
async def set_accept_messages(
    body: AcceptMessagesRequest,
    ctx: AuthContext = Depends(get_auth_context),
):
    user = await user_service.set_accepting_messages(ctx.user_id, body.accept_messages)
    return {
        "success": True,
        "message": "Message acceptance status updated successfully",
        "updatedUser": user.to_public(),
    }


@router.get("/accept-messages")
async def get_accept_messages(ctx: AuthContext = Depends(get_auth_context)):
    value = await user_service.get_accepting_messages(ctx.user_id)
    return {"success": True, "isAcceptingMessages": value}
