"""Client-side models for chat, contact and message display."""
from dataclasses import dataclass
from typing import Optional

from . import schemas


@dataclass
class User:
    id: int
    name: str
    login: str = ""

    @classmethod
    def from_wire(cls, data) -> "User":
        return cls(id=data.id, name=data.name, login=data.login)


@dataclass
class Chat:
    id: int
    name: str
    is_group: bool = False
    created_by: int = 0
    created_at: str = ""

    @property
    def label(self) -> str:
        return f"{self.name} (ID: {self.id})"

    @classmethod
    def from_wire(cls, data: schemas.ChatOut) -> "Chat":
        return cls(
            id=data.id,
            name=data.name,
            is_group=data.is_group,
            created_by=data.created_by,
            created_at=data.created_at,
        )


@dataclass
class Contact:
    user_id: int
    name: str

    @classmethod
    def from_wire(cls, data: schemas.ContactOut) -> "Contact":
        return cls(user_id=data.user_id, name=data.name)


@dataclass
class Message:
    id: int
    user_id: int
    user_name: str
    content: str
    timestamp: str
    reply_id: int = 0
    resend_id: int = 0
    can_edit: bool = False

    @property
    def is_forwarded(self) -> bool:
        return self.resend_id != 0

    def display_text(self) -> str:
        prefix = f"[{self.timestamp}] " if self.timestamp else ""
        reply = f" (reply to #{self.reply_id})" if self.reply_id else ""
        return f"{prefix}{self.user_name}{reply}: {self.content}"

    @classmethod
    def from_wire(cls, data: schemas.MessageOut, current_user_id: Optional[int] = None) -> "Message":
        # The server does not return sender names with messages.
        return cls(
            id=data.id,
            user_id=data.user_id,
            user_name=f"User{data.user_id}",
            content=data.message,
            timestamp=data.send_date,
            reply_id=data.reply_id,
            resend_id=data.resend_id,
            can_edit=current_user_id is not None and data.user_id == current_user_id,
        )
