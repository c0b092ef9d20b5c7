from anonbox.models.user import Message, User

__all__ = [
    "Message",
    "User",
]
