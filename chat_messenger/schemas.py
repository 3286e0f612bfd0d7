"""Pydantic schemas for request and response bodies exchanged with the chat server."""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class RegisterRequest(WireModel):
    name: str
    login: str
    password: str


class LoginRequest(WireModel):
    login: str
    password: str


class CreateChatRequest(WireModel):
    name: str
    is_group: bool = Field(False, alias="isGroup")
    created_by: int = Field(..., alias="createdBy")
    participants: List[int] = Field(default_factory=list)


class AddContactRequest(WireModel):
    user_id1: int = Field(..., alias="userId1")
    user_id2: int = Field(..., alias="userId2")


class SendMessageRequest(WireModel):
    user_id: int = Field(..., alias="userId")
    chat_id: int = Field(..., alias="chatId")
    message: str
    reply_id: Optional[int] = Field(None, alias="replyId")
    resend_id: Optional[int] = Field(None, alias="resendId")


class EditMessageRequest(WireModel):
    user_id: int = Field(..., alias="userId")
    message: str


class DeleteMessageRequest(WireModel):
    user_id: int = Field(..., alias="userId")


class ForwardMessageRequest(WireModel):
    original_message_id: int = Field(..., alias="originalMessageId")
    target_chat_id: int = Field(..., alias="targetChatId")
    user_id: int = Field(..., alias="userId")


class CreatedResponse(WireModel):
    id: int


class LoginResponse(WireModel):
    id: int
    name: str
    login: str = ""


class UserOut(WireModel):
    id: int
    name: str
    login: str = ""


class ChatOut(WireModel):
    id: int
    name: str
    is_group: bool = Field(False, alias="isGroup")
    created_by: int = Field(0, alias="createdBy")
    created_at: str = Field("", alias="createdAt")


class ContactOut(WireModel):
    user_id: int = Field(..., alias="userId")
    name: str


class MessageOut(WireModel):
    id: int
    user_id: int = Field(..., alias="userId")
    message: str
    send_date: str = Field("", alias="sendDate")
    reply_id: int = Field(0, alias="replyId")
    resend_id: int = Field(0, alias="resendId")
