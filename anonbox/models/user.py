from datetime import datetime
from typing import Any

from beanie import Document, Indexed, PydanticObjectId
from pydantic import BaseModel, Field


def utc_isoformat(value: datetime) -> str:
    """ISO 8601 with an explicit UTC marker; stored datetimes are naive UTC."""
    if value.tzinfo is None:
        return value.isoformat() + "Z"
    return value.isoformat()


class Message(BaseModel):
    """Anonymous message embedded in its recipient's document."""

    id: PydanticObjectId = Field(default_factory=PydanticObjectId)
    content: str
    created_at: datetime = Field(default_factory=datetime.utcnow)

    def to_public(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "content": self.content,
            "createdAt": utc_isoformat(self.created_at),
        }


class User(Document):
    username: Indexed(str, unique=True)
    email: Indexed(str, unique=True)
    password_hash: str = Field(default="", repr=False)
    is_verified: bool = False
    # Only meaningful while is_verified is False
    verify_code: str = Field(default="", repr=False)
    verify_code_expiry: datetime | None = None
    is_accepting_messages: bool = True
    messages: list[Message] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "users"

    def to_public(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "username": self.username,
            "email": self.email,
            "isVerified": self.is_verified,
            "isAcceptingMessages": self.is_accepting_messages,
            "createdAt": utc_isoformat(self.created_at),
        }
