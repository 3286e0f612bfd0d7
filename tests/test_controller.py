"""Tests for ChatController session state and operations."""
import pytest

from chat_messenger import storage
from chat_messenger.api import APIError
from chat_messenger.forms import CreateChatForm, LoginForm, RegisterForm
from chat_messenger.gui.app import ChatController, NoChatSelectedError, NotLoggedInError, is_duplicate_contact
from chat_messenger.models import Chat, User

from conftest import BASE_URL, FakeResponse

CHATS = {
    "status": "success",
    "chats": [
        {"id": 3, "name": "General", "isGroup": True, "createdBy": 7, "createdAt": "2024-01-01 10:00:00"},
        {"id": 4, "name": "Bob", "isGroup": False, "createdBy": 2, "createdAt": "2024-01-02 10:00:00"},
    ],
}
CONTACTS = {"status": "success", "contacts": [{"userId": 2, "name": "Bob"}]}
MESSAGES = {
    "status": "success",
    "messages": [
        {"id": 20, "userId": 2, "message": "hi", "sendDate": "2024-01-01 10:01:00"},
        {"id": 21, "userId": 7, "message": "hello", "sendDate": "2024-01-01 10:02:00"},
    ],
}


@pytest.fixture
def controller(server):
    return ChatController(BASE_URL)


@pytest.fixture
def logged_in(controller, server):
    server.add("POST", "/auth/login", FakeResponse(200, {"id": 7, "name": "Alice", "login": "alice"}))
    server.add("GET", "/chats/7", FakeResponse(200, CHATS))
    server.add("GET", "/contacts/7", FakeResponse(200, CONTACTS))
    server.add("GET", "/chats/3/messages", FakeResponse(200, MESSAGES))
    controller.login(LoginForm(" alice ", "pw"))
    return controller


def test_base_url_falls_back_to_stored_url(server):
    storage.store_server_url("http://stored.example:1/")
    assert ChatController().base_url == "http://stored.example:1"


def test_set_base_url_persists(controller):
    controller.set_base_url(" http://other.example:18080/ ")
    assert controller.base_url == "http://other.example:18080"
    assert controller.api.base_url == "http://other.example:18080"
    assert storage.get_server_url() == "http://other.example:18080"


def test_status_text_states(logged_in):
    assert ChatController(BASE_URL).status_text() == "Not logged in"
    assert logged_in.status_text() == "User: Alice (ID: 7) | No chat selected"
    logged_in.select_chat(3)
    assert logged_in.status_text() == "User: Alice | Chat: General (ID: 3)"


def test_register_returns_new_id(controller, server):
    server.add("POST", "/auth/register", FakeResponse(200, {"id": 12, "status": "success"}))
    assert controller.register(RegisterForm(" Alice ", " alice ", "pw")) == 12
    assert server.requests_to("POST", "/auth/register") == [{"name": "Alice", "login": "alice", "password": "pw"}]


def test_invalid_form_sends_nothing(controller, server):
    with pytest.raises(ValueError):
        controller.register(RegisterForm("", "alice", "pw"))
    with pytest.raises(ValueError):
        controller.login(LoginForm("alice", ""))
    assert server.calls == []


def test_login_loads_chats_and_contacts(logged_in, server):
    assert logged_in.user == User(id=7, name="Alice", login="alice")
    assert [c.id for c in logged_in.chats] == [3, 4]
    assert [c.name for c in logged_in.contacts] == ["Bob"]
    assert server.requests_to("POST", "/auth/login") == [{"login": "alice", "password": "pw"}]
    assert storage.get_last_login() == "alice"


def test_login_failure_leaves_user_unset(controller, server):
    server.add("POST", "/auth/login", FakeResponse(401, {"error": "Invalid credentials"}))
    with pytest.raises(APIError, match="Invalid credentials"):
        controller.login(LoginForm("alice", "bad"))
    assert controller.user is None


def test_login_survives_failed_list_loading(controller, server):
    server.add("POST", "/auth/login", FakeResponse(200, {"id": 7, "name": "Alice", "login": "alice"}))
    server.add("GET", "/chats/7", FakeResponse(500, {"error": "Error: db"}))
    user = controller.login(LoginForm("alice", "pw"))
    assert user.id == 7
    assert controller.chats == []


def test_login_resets_selected_chat(logged_in):
    logged_in.select_chat(3)
    logged_in.load_messages()
    logged_in.login(LoginForm("alice", "pw"))
    assert logged_in.current_chat is None
    assert logged_in.messages == []


def test_operations_require_login(controller, server):
    with pytest.raises(NotLoggedInError):
        controller.load_chats()
    with pytest.raises(NotLoggedInError):
        controller.send_message("hi", chat_id=3)
    with pytest.raises(NotLoggedInError):
        controller.add_contact(2)
    assert server.calls == []


def test_logout_clears_state(logged_in):
    logged_in.select_chat(3)
    logged_in.logout()
    assert logged_in.user is None
    assert logged_in.current_chat is None
    assert logged_in.chats == [] and logged_in.contacts == []
    assert storage.get_last_login() is None


def test_select_chat_uses_loaded_chat(logged_in):
    chat = logged_in.select_chat(3)
    assert chat.name == "General"


def test_select_unknown_chat_gets_placeholder(logged_in):
    assert logged_in.select_chat(99) == Chat(id=99, name="Chat 99")


def test_load_messages_requires_selection(logged_in):
    with pytest.raises(NoChatSelectedError):
        logged_in.load_messages()


def test_load_messages_binds_selected_chat(logged_in):
    logged_in.select_chat(3)
    messages = logged_in.load_messages()
    assert [m.id for m in messages] == [20, 21]
    assert logged_in.messages == messages
    assert [m.can_edit for m in messages] == [False, True]


def test_switching_chat_clears_messages(logged_in):
    logged_in.select_chat(3)
    logged_in.load_messages()
    logged_in.select_chat(4)
    assert logged_in.messages == []


def test_create_chat_reloads_chats(logged_in, server):
    server.add("POST", "/chats", FakeResponse(200, {"id": 5, "status": "success"}))
    calls_before = len(server.requests_to("GET", "/chats/7"))
    assert logged_in.create_chat(CreateChatForm("Team", True, "2, 4")) == 5
    assert server.requests_to("POST", "/chats") == [
        {"name": "Team", "isGroup": True, "createdBy": 7, "participants": [2, 4]}
    ]
    assert len(server.requests_to("GET", "/chats/7")) == calls_before + 1


def test_add_contact_rejects_self(logged_in, server):
    with pytest.raises(ValueError, match="yourself"):
        logged_in.add_contact(7)
    assert server.requests_to("POST", "/contacts") == []


def test_add_contact_reloads_contacts(logged_in, server):
    server.add("POST", "/contacts", FakeResponse(200, {"id": 11, "status": "success"}))
    server.add("GET", "/contacts/7", FakeResponse(200, {"contacts": [{"userId": 2, "name": "Bob"}, {"userId": 5, "name": "Eve"}]}))
    assert logged_in.add_contact(5) == 11
    assert [c.user_id for c in logged_in.contacts] == [2, 5]


def test_duplicate_contact_detected(logged_in, server):
    server.add("POST", "/contacts", FakeResponse(400, {"error": "Contact already exists"}))
    with pytest.raises(APIError) as info:
        logged_in.add_contact(2)
    assert is_duplicate_contact(info.value)
    assert not is_duplicate_contact(APIError("User not found", 404))


def test_search_users_requires_query(controller, server):
    with pytest.raises(ValueError):
        controller.search_users("  ")
    server.add("GET", "/users/search/bo", FakeResponse(200, {"users": [{"id": 2, "name": "Bob", "login": "bob"}]}))
    assert controller.search_users(" bo ") == [User(id=2, name="Bob", login="bob")]


def test_get_user(controller, server):
    server.add("GET", "/users/2", FakeResponse(200, {"id": 2, "name": "Bob", "login": "bob"}))
    assert controller.get_user(2).login == "bob"


def test_send_message_to_selected_chat_reloads(logged_in, server):
    server.add("POST", "/messages", FakeResponse(200, {"id": 22}))
    logged_in.select_chat(3)
    assert logged_in.send_message(" hey ", reply_id=20) == 22
    assert server.requests_to("POST", "/messages") == [{"userId": 7, "chatId": 3, "message": "hey", "replyId": 20}]
    assert len(logged_in.messages) == 2


def test_send_message_needs_chat_and_text(logged_in, server):
    with pytest.raises(NoChatSelectedError):
        logged_in.send_message("hey")
    with pytest.raises(ValueError, match="Enter a message"):
        logged_in.send_message("   ", chat_id=3)
    assert server.requests_to("POST", "/messages") == []


def test_send_message_to_other_chat_keeps_selection(logged_in, server):
    server.add("POST", "/messages", FakeResponse(200, {"id": 23}))
    logged_in.send_message("yo", chat_id=4)
    assert logged_in.current_chat is None
    assert server.requests_to("GET", "/chats/4/messages") == []


def test_edit_own_message(logged_in, server):
    server.add("PUT", "/messages/21", FakeResponse(200, {"status": "success"}))
    logged_in.select_chat(3)
    logged_in.load_messages()
    logged_in.edit_message(21, "hello again")
    assert server.requests_to("PUT", "/messages/21") == [{"userId": 7, "message": "hello again"}]


def test_cannot_change_other_users_message(logged_in, server):
    logged_in.select_chat(3)
    logged_in.load_messages()
    with pytest.raises(ValueError, match="own messages"):
        logged_in.edit_message(20, "nope")
    with pytest.raises(ValueError, match="own messages"):
        logged_in.delete_message(20)
    assert server.requests_to("PUT", "/messages/20") == []
    assert server.requests_to("DELETE", "/messages/20") == []


def test_delete_own_message(logged_in, server):
    server.add("DELETE", "/messages/21", FakeResponse(200, {"status": "success"}))
    logged_in.select_chat(3)
    logged_in.load_messages()
    logged_in.delete_message(21)
    assert server.requests_to("DELETE", "/messages/21") == [{"userId": 7}]


def test_forward_message(logged_in, server):
    server.add("POST", "/messages/forward", FakeResponse(200, {"id": 40}))
    assert logged_in.forward_message(20, 4) == 40
    assert server.requests_to("POST", "/messages/forward") == [
        {"originalMessageId": 20, "targetChatId": 4, "userId": 7}
    ]


def test_login_survives_non_list_chats(controller, server):
    server.add("POST", "/auth/login", FakeResponse(200, {"id": 7, "name": "Alice", "login": "alice"}))
    server.add("GET", "/chats/7", FakeResponse(200, {"chats": 5}))
    user = controller.login(LoginForm("alice", "pw"))
    assert user.id == 7
    assert controller.chats == []
    with pytest.raises(APIError, match="Malformed chats list"):
        controller.load_chats()


EDITED = {
    "messages": [
        {"id": 20, "userId": 2, "message": "hi", "sendDate": "2024-01-01 10:01:00"},
        {"id": 21, "userId": 7, "message": "hello again", "sendDate": "2024-01-01 10:02:00"},
    ]
}


def _open_general(controller, server):
    controller.select_chat(3)
    controller.load_messages()
    return len(server.requests_to("GET", "/chats/3/messages"))


def test_edit_reloads_messages(logged_in, server):
    server.add("PUT", "/messages/21", FakeResponse(200, {"status": "success"}))
    loads = _open_general(logged_in, server)
    server.add("GET", "/chats/3/messages", FakeResponse(200, EDITED))
    logged_in.edit_message(21, "hello again")
    assert len(server.requests_to("GET", "/chats/3/messages")) == loads + 1
    assert logged_in.find_message(21).content == "hello again"


def test_delete_reloads_messages(logged_in, server):
    server.add("DELETE", "/messages/21", FakeResponse(200, {"status": "success"}))
    loads = _open_general(logged_in, server)
    server.add("GET", "/chats/3/messages", FakeResponse(200, {"messages": MESSAGES["messages"][:1]}))
    logged_in.delete_message(21)
    assert len(server.requests_to("GET", "/chats/3/messages")) == loads + 1
    assert [m.id for m in logged_in.messages] == [20]


def test_forward_into_selected_chat_reloads_messages(logged_in, server):
    server.add("POST", "/messages/forward", FakeResponse(200, {"id": 40}))
    loads = _open_general(logged_in, server)
    forwarded = {"id": 40, "userId": 7, "message": "[Forwarded] hi", "sendDate": "x", "resendId": 2}
    server.add("GET", "/chats/3/messages", FakeResponse(200, {"messages": MESSAGES["messages"] + [forwarded]}))
    assert logged_in.forward_message(20, 3) == 40
    assert len(server.requests_to("GET", "/chats/3/messages")) == loads + 1
    assert logged_in.messages[-1].is_forwarded


def test_forward_into_other_chat_keeps_loaded_messages(logged_in, server):
    server.add("POST", "/messages/forward", FakeResponse(200, {"id": 41}))
    loads = _open_general(logged_in, server)
    logged_in.forward_message(20, 4)
    assert len(server.requests_to("GET", "/chats/3/messages")) == loads
    assert server.requests_to("GET", "/chats/4/messages") == []
    assert [m.id for m in logged_in.messages] == [20, 21]
