"""Anonymous message intake, retrieval and deletion."""

from beanie import PydanticObjectId
from beanie.operators import Pull, Push
from bson.errors import InvalidId

from anonbox.core.exceptions import ForbiddenError, NotFoundError
from anonbox.core.logging import get_logger
from anonbox.models.user import Message, User
from anonbox.services.users import get_user

log = get_logger(__name__)


async def send_message(username: str, content: str) -> Message:
    """Append an anonymous message if the recipient accepts messages right now."""
    user = await User.find_one(User.username == username)
    if not user:
        raise NotFoundError("User not found")
    if not user.is_accepting_messages:
        log.info("message_rejected", user_id=str(user.id), reason="not_accepting")
        raise ForbiddenError("User is not accepting messages")

    message = Message(content=content)
    # $push so concurrent senders never overwrite each other
    await user.update(Push({User.messages: message.model_dump()}))
    log.info("message_sent", user_id=str(user.id), message_id=str(message.id))
    return message


def sort_newest_first(messages: list[Message]) -> list[Message]:
    return sorted(messages, key=lambda m: m.created_at, reverse=True)


async def get_messages(user_id: PydanticObjectId) -> list[Message]:
    """Caller's own messages, most recent first. No messages gives []."""
    user = await get_user(user_id)
    return sort_newest_first(user.messages)


async def delete_message(user_id: PydanticObjectId, message_id: str) -> None:
    user = await get_user(user_id)
    try:
        oid = PydanticObjectId(message_id)
    except (InvalidId, TypeError):
        raise NotFoundError("Message not found")
    if not any(m.id == oid for m in user.messages):
        raise NotFoundError("Message not found")
    await user.update(Pull({User.messages: {"id": oid}}))
    log.info("message_deleted", user_id=str(user_id), message_id=message_id)
