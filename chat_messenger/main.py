"""Console client for the chat messenger."""
import sys
from typing import Optional

from .api import APIError
from .forms import AddContactForm, CreateChatForm, LoginForm, RegisterForm, SendMessageForm
from .gui.app import ChatController, is_duplicate_contact
from .utils import parse_id


class ConsoleClient:
    """Interactive numbered-menu client."""

    def __init__(self, controller: ChatController):
        self.controller = controller

    def _logged_in(self) -> bool:
        if self.controller.user is None:
            print("Log in first!")
            return False
        return True

    def register(self) -> None:
        form = RegisterForm(input("Name: "), input("Login: "), input("Password: "))
        try:
            user_id = self.controller.register(form)
        except (APIError, ValueError) as exc:
            print(f"Registration failed: {exc}")
            return
        print(f"Registration successful! ID: {user_id}")

    def login(self) -> bool:
        form = LoginForm(input("Login: "), input("Password: "))
        try:
            user = self.controller.login(form)
        except (APIError, ValueError) as exc:
            print(f"Login failed: {exc}")
            return False
        print(f"Logged in! User ID: {user.id}")
        return True

    def list_chats(self) -> None:
        if not self._logged_in():
            return
        try:
            chats = self.controller.load_chats()
        except APIError as exc:
            print(f"Could not fetch chats: {exc}")
            return
        if not chats:
            print("No chats yet.")
        for chat in chats:
            kind = "group" if chat.is_group else "private"
            print(f"- {chat.id}: {chat.name} ({kind}, created {chat.created_at})")

    def create_chat(self) -> None:
        if not self._logged_in():
            return
        name = input("Chat name: ")
        is_group = input("Group chat? (y/n): ").strip().lower() == "y"
        participants = input("Participants (comma separated IDs): ")
        try:
            chat_id = self.controller.create_chat(CreateChatForm(name, is_group, participants))
        except (APIError, ValueError) as exc:
            print(f"Could not create chat: {exc}")
            return
        print(f"Chat created. ID: {chat_id}")

    def add_contact(self) -> None:
        if not self._logged_in():
            return
        form = AddContactForm(input("User ID to add: "))
        try:
            self.controller.add_contact(form.friend_id())
        except ValueError as exc:
            print(exc)
            return
        except APIError as exc:
            if is_duplicate_contact(exc):
                print("This user is already in your contacts.")
            else:
                print(f"Could not add contact: {exc}")
            return
        print("Contact added.")
        for contact in self.controller.contacts:
            print(f"- {contact.user_id}: {contact.name}")

    def send_message(self) -> None:
        if not self._logged_in():
            return
        form = SendMessageForm(input("Chat ID: "), input("Message: "))
        try:
            form.validate()
            message_id = self.controller.send_message(form.message, chat_id=form.chat_id())
        except (APIError, ValueError) as exc:
            print(f"Could not send message: {exc}")
            return
        print(f"Message sent. ID: {message_id}")

    def show_messages(self) -> None:
        if not self._logged_in():
            return
        try:
            chat_id = parse_id(input("Chat ID: "), "Invalid chat ID!")
            self.controller.select_chat(chat_id)
            messages = self.controller.load_messages()
        except ValueError as exc:
            print(exc)
            return
        except APIError as exc:
            print(f"Could not fetch messages: {exc}")
            return
        if not messages:
            print("No messages.")
        for msg in messages:
            print(msg.display_text())

    def search_users(self) -> None:
        try:
            users = self.controller.search_users(input("Search: "))
        except (APIError, ValueError) as exc:
            print(f"Search failed: {exc}")
            return
        if not users:
            print("No users found.")
        for user in users:
            print(f"- {user.id}: {user.name} ({user.login})")


MENU = (
    ("1", "Register", ConsoleClient.register),
    ("2", "Login", ConsoleClient.login),
    ("3", "My chats", ConsoleClient.list_chats),
    ("4", "Create chat", ConsoleClient.create_chat),
    ("5", "Add contact", ConsoleClient.add_contact),
    ("6", "Send message", ConsoleClient.send_message),
    ("7", "Show chat messages", ConsoleClient.show_messages),
    ("8", "Search users", ConsoleClient.search_users),
)
EXIT_CHOICE = "9"


def run(client: ConsoleClient) -> None:
    actions = {key: handler for key, _, handler in MENU}
    while True:
        print()
        for key, label, _ in MENU:
            print(f"{key}. {label}")
        print(f"{EXIT_CHOICE}. Exit")
        choice = input("Choose an action: ").strip()
        if choice == EXIT_CHOICE:
            return
        handler = actions.get(choice)
        if handler is not None:
            handler(client)


def main(argv: Optional[list] = None) -> None:
    argv = sys.argv[1:] if argv is None else argv
    print("=== Chat Messenger ===")
    controller = ChatController(argv[0] if argv else None)
    print(f"Server: {controller.base_url}")
    try:
        run(ConsoleClient(controller))
    except (EOFError, KeyboardInterrupt):
        print()


if __name__ == "__main__":
    main()
