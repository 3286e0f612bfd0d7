"""Typed input collected by the modal dialogs, with client-side validation.

Each form raises ``ValueError`` carrying a user-facing message on the first
rule that fails, checking fields in the order the dialog shows them.
"""
from dataclasses import dataclass
from typing import List

from .utils import parse_id, parse_id_list, require_text


@dataclass
class LoginForm:
    login: str
    password: str

    def validate(self) -> None:
        require_text(self.login, "Enter a login")
        require_text(self.password, "Enter a password")


@dataclass
class RegisterForm:
    name: str
    login: str
    password: str

    def validate(self) -> None:
        require_text(self.name, "Enter a name")
        require_text(self.login, "Enter a login")
        require_text(self.password, "Enter a password")


@dataclass
class CreateChatForm:
    name: str
    is_group: bool = False
    participants_text: str = ""

    def validate(self) -> None:
        require_text(self.name, "Enter a chat name")
        self.participants()

    def participants(self) -> List[int]:
        return parse_id_list(self.participants_text)


@dataclass
class AddContactForm:
    friend_id_text: str
    friend_login: str = ""

    def validate(self) -> None:
        self.friend_id()

    def friend_id(self) -> int:
        return parse_id(self.friend_id_text, "Enter a valid user ID")


@dataclass
class SendMessageForm:
    chat_id_text: str
    message: str

    def validate(self) -> None:
        self.chat_id()
        require_text(self.message, "Enter a message")

    def chat_id(self) -> int:
        return parse_id(self.chat_id_text, "Enter a valid chat ID")
