"""Application controller logic shared by the PyQt GUI and the console client."""
from __future__ import annotations

from typing import List, Optional

from .. import api
from ..config import DEFAULT_SERVER_URL
from ..forms import CreateChatForm, LoginForm, RegisterForm
from ..logging_config import configure_logging
from ..models import Chat, Contact, Message, User
from ..storage import clear_last_login, get_server_url, store_last_login, store_server_url
from ..utils import require_text

logger = configure_logging()

CONTACT_EXISTS = "Contact already exists"


class NotLoggedInError(RuntimeError):
    def __init__(self) -> None:
        super().__init__("Log in first")


class NoChatSelectedError(RuntimeError):
    def __init__(self) -> None:
        super().__init__("Select a chat first")


def is_duplicate_contact(exc: Exception) -> bool:
    return isinstance(exc, api.APIError) and exc.error == CONTACT_EXISTS


class ChatController:
    """Holds the logged-in user and selected chat, and wraps every server call."""

    def __init__(self, base_url: Optional[str] = None):
        self.base_url = (base_url or get_server_url() or DEFAULT_SERVER_URL).rstrip("/")
        self.api = api.APIClient(self.base_url)
        self.user: Optional[User] = None
        self.current_chat: Optional[Chat] = None
        self.chats: List[Chat] = []
        self.contacts: List[Contact] = []
        self.messages: List[Message] = []

    def set_base_url(self, url: str) -> None:
        self.base_url = url.strip().rstrip("/")
        store_server_url(self.base_url)
        self.api = api.APIClient(self.base_url)

    def require_user(self) -> User:
        if self.user is None:
            raise NotLoggedInError()
        return self.user

    def reset_chat_state(self) -> None:
        self.current_chat = None
        self.messages = []

    def status_text(self) -> str:
        if self.user is None:
            return "Not logged in"
        if self.current_chat is None:
            return f"User: {self.user.name} (ID: {self.user.id}) | No chat selected"
        return f"User: {self.user.name} | Chat: {self.current_chat.label}"

    def register(self, form: RegisterForm) -> int:
        form.validate()
        created = self.api.register(form.name.strip(), form.login.strip(), form.password)
        logger.info("REGISTER_SUCCESS login=%s user_id=%s", form.login.strip(), created.id)
        return created.id

    def login(self, form: LoginForm) -> User:
        self.reset_chat_state()
        form.validate()
        login = form.login.strip()
        try:
            response = self.api.login(login, form.password)
        except api.APIError:
            logger.info("LOGIN_FAIL login=%s", login)
            raise
        self.user = User.from_wire(response)
        store_last_login(login)
        logger.info("LOGIN_SUCCESS login=%s user_id=%s", login, self.user.id)
        try:
            self.load_chats()
            self.load_contacts()
        except api.APIError as exc:
            logger.warning("LOAD_FAIL after login user_id=%s error=%s", self.user.id, exc)
        return self.user

    def logout(self) -> None:
        clear_last_login()
        self.user = None
        self.chats = []
        self.contacts = []
        self.reset_chat_state()

    def load_chats(self) -> List[Chat]:
        user = self.require_user()
        self.chats = [Chat.from_wire(c) for c in self.api.get_chats(user.id)]
        return self.chats

    def load_contacts(self) -> List[Contact]:
        user = self.require_user()
        self.contacts = [Contact.from_wire(c) for c in self.api.get_contacts(user.id)]
        return self.contacts

    def load_messages(self, chat_id: Optional[int] = None) -> List[Message]:
        user = self.require_user()
        if chat_id is None:
            if self.current_chat is None:
                raise NoChatSelectedError()
            chat_id = self.current_chat.id
        messages = [Message.from_wire(m, user.id) for m in self.api.get_messages(chat_id)]
        if self.current_chat is not None and chat_id == self.current_chat.id:
            self.messages = messages
        return messages

    def select_chat(self, chat_id: int) -> Chat:
        self.require_user()
        chat = self.find_chat(chat_id) or Chat(id=chat_id, name=f"Chat {chat_id}")
        if self.current_chat is None or self.current_chat.id != chat.id:
            self.messages = []
        self.current_chat = chat
        return chat

    def find_chat(self, chat_id: int) -> Optional[Chat]:
        return next((c for c in self.chats if c.id == chat_id), None)

    def find_message(self, message_id: int) -> Optional[Message]:
        return next((m for m in self.messages if m.id == message_id), None)

    def create_chat(self, form: CreateChatForm) -> int:
        user = self.require_user()
        form.validate()
        created = self.api.create_chat(form.name.strip(), form.is_group, user.id, form.participants())
        logger.info("CHAT_CREATED chat_id=%s user_id=%s group=%s", created.id, user.id, form.is_group)
        self.load_chats()
        return created.id

    def add_contact(self, friend_id: int) -> int:
        user = self.require_user()
        if friend_id == user.id:
            raise ValueError("You cannot add yourself to contacts")
        created = self.api.add_contact(user.id, friend_id)
        logger.info("CONTACT_ADDED user_id=%s friend_id=%s", user.id, friend_id)
        self.load_contacts()
        return created.id

    def search_users(self, query: str) -> List[User]:
        query = require_text(query, "Enter a user login to search for")
        return [User.from_wire(u) for u in self.api.search_users(query)]

    def get_user(self, user_id: int) -> User:
        return User.from_wire(self.api.get_user(user_id))

    def send_message(self, text: str, chat_id: Optional[int] = None, reply_id: Optional[int] = None) -> int:
        user = self.require_user()
        if chat_id is None:
            if self.current_chat is None:
                raise NoChatSelectedError()
            chat_id = self.current_chat.id
        text = require_text(text, "Enter a message")
        created = self.api.send_message(user.id, chat_id, text, reply_id=reply_id)
        logger.info("MESSAGE_SENT message_id=%s chat_id=%s user_id=%s", created.id, chat_id, user.id)
        if self.current_chat is not None and self.current_chat.id == chat_id:
            self.load_messages()
        return created.id

    def _own_message(self, message_id: int) -> Message:
        message = self.find_message(message_id)
        if message is None or not message.can_edit:
            raise ValueError("You can only change your own messages")
        return message

    def edit_message(self, message_id: int, text: str) -> None:
        user = self.require_user()
        self._own_message(message_id)
        text = require_text(text, "Enter a message")
        self.api.edit_message(message_id, user.id, text)
        logger.info("MESSAGE_EDITED message_id=%s user_id=%s", message_id, user.id)
        self.load_messages()

    def delete_message(self, message_id: int) -> None:
        user = self.require_user()
        self._own_message(message_id)
        self.api.delete_message(message_id, user.id)
        logger.info("MESSAGE_DELETED message_id=%s user_id=%s", message_id, user.id)
        self.load_messages()

    def forward_message(self, message_id: int, target_chat_id: int) -> int:
        user = self.require_user()
        created = self.api.forward_message(message_id, target_chat_id, user.id)
        logger.info(
            "MESSAGE_FORWARDED message_id=%s target_chat_id=%s new_id=%s", message_id, target_chat_id, created.id
        )
        if self.current_chat is not None and self.current_chat.id == target_chat_id:
            self.load_messages()
        return created.id


__all__ = [
    "CONTACT_EXISTS",
    "ChatController",
    "NoChatSelectedError",
    "NotLoggedInError",
    "is_duplicate_contact",
]
