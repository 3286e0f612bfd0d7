"""HTTP API client for interacting with the chat server."""
from typing import Any, Dict, List, Optional, Type, TypeVar
from urllib.parse import quote

import requests
from pydantic import ValidationError

from . import schemas
from .config import REQUEST_TIMEOUT
from .logging_config import configure_logging

logger = configure_logging()

ModelT = TypeVar("ModelT", bound=schemas.WireModel)


class APIError(Exception):
    """A request failed: transport error, non-2xx status or unreadable body."""

    def __init__(self, error: str, status_code: Optional[int] = None):
        super().__init__(error)
        self.error = error
        self.status_code = status_code

    @classmethod
    def from_response(cls, resp: requests.Response) -> "APIError":
        error = resp.text or resp.reason or "Unknown error"
        try:
            body = resp.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("error"):
            error = str(body["error"])
        return cls(error, status_code=resp.status_code)


class APIClient:
    def __init__(self, base_url: str, timeout: float = REQUEST_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _send(self, method: str, path: str, payload: Optional[schemas.WireModel] = None) -> requests.Response:
        url = f"{self.base_url}{path}"
        body = payload.to_payload() if payload is not None else None
        try:
            resp = requests.request(method, url, json=body, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("REQUEST_FAIL method=%s url=%s error=%s", method, url, exc)
            raise APIError(f"Connection error: {exc}") from exc
        if not resp.ok:
            err = APIError.from_response(resp)
            logger.info("REQUEST_REJECTED method=%s url=%s status=%s error=%s", method, url, resp.status_code, err.error)
            raise err
        return resp

    def _json(self, method: str, path: str, payload: Optional[schemas.WireModel] = None) -> Dict[str, Any]:
        resp = self._send(method, path, payload)
        try:
            data = resp.json()
        except ValueError as exc:
            raise APIError(f"Invalid JSON in response: {resp.text[:200]}", status_code=resp.status_code) from exc
        if not isinstance(data, dict):
            raise APIError("Unexpected response shape", status_code=resp.status_code)
        return data

    @staticmethod
    def _one(model: Type[ModelT], data: Dict[str, Any]) -> ModelT:
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise APIError(f"Malformed response: {exc.error_count()} invalid field(s)") from exc

    @staticmethod
    def _many(model: Type[ModelT], data: Dict[str, Any], key: str, skip_invalid: bool = False) -> List[ModelT]:
        items = data.get(key)
        if items is None:
            logger.warning("MISSING_KEY key=%s", key)
            return []
        if not isinstance(items, list):
            raise APIError(f"Malformed {key} list in response")
        results: List[ModelT] = []
        for item in items:
            try:
                results.append(model.model_validate(item))
            except ValidationError as exc:
                if not skip_invalid:
                    raise APIError(f"Malformed {key} entry in response") from exc
                logger.warning("MALFORMED_ENTRY key=%s entry=%r", key, item)
        return results

    def ping(self) -> str:
        return self._send("GET", "/").text

    def register(self, name: str, login: str, password: str) -> schemas.CreatedResponse:
        payload = schemas.RegisterRequest(name=name, login=login, password=password)
        return self._one(schemas.CreatedResponse, self._json("POST", "/auth/register", payload))

    def login(self, login: str, password: str) -> schemas.LoginResponse:
        payload = schemas.LoginRequest(login=login, password=password)
        return self._one(schemas.LoginResponse, self._json("POST", "/auth/login", payload))

    def get_user(self, user_id: int) -> schemas.UserOut:
        return self._one(schemas.UserOut, self._json("GET", f"/users/{user_id}"))

    def search_users(self, query: str) -> List[schemas.UserOut]:
        data = self._json("GET", f"/users/search/{quote(query, safe='')}")
        return self._many(schemas.UserOut, data, "users")

    def get_chats(self, user_id: int) -> List[schemas.ChatOut]:
        return self._many(schemas.ChatOut, self._json("GET", f"/chats/{user_id}"), "chats")

    def create_chat(
        self, name: str, is_group: bool, created_by: int, participants: List[int]
    ) -> schemas.CreatedResponse:
        payload = schemas.CreateChatRequest(
            name=name, is_group=is_group, created_by=created_by, participants=participants
        )
        return self._one(schemas.CreatedResponse, self._json("POST", "/chats", payload))

    def get_contacts(self, user_id: int) -> List[schemas.ContactOut]:
        data = self._json("GET", f"/contacts/{user_id}")
        return self._many(schemas.ContactOut, data, "contacts", skip_invalid=True)

    def add_contact(self, user_id: int, friend_id: int) -> schemas.CreatedResponse:
        payload = schemas.AddContactRequest(user_id1=user_id, user_id2=friend_id)
        return self._one(schemas.CreatedResponse, self._json("POST", "/contacts", payload))

    def get_messages(self, chat_id: int) -> List[schemas.MessageOut]:
        return self._many(schemas.MessageOut, self._json("GET", f"/chats/{chat_id}/messages"), "messages")

    def send_message(
        self,
        user_id: int,
        chat_id: int,
        message: str,
        reply_id: Optional[int] = None,
        resend_id: Optional[int] = None,
    ) -> schemas.CreatedResponse:
        payload = schemas.SendMessageRequest(
            user_id=user_id, chat_id=chat_id, message=message, reply_id=reply_id, resend_id=resend_id
        )
        return self._one(schemas.CreatedResponse, self._json("POST", "/messages", payload))

    def edit_message(self, message_id: int, user_id: int, message: str) -> None:
        payload = schemas.EditMessageRequest(user_id=user_id, message=message)
        self._send("PUT", f"/messages/{message_id}", payload)

    def delete_message(self, message_id: int, user_id: int) -> None:
        self._send("DELETE", f"/messages/{message_id}", schemas.DeleteMessageRequest(user_id=user_id))

    def forward_message(self, original_message_id: int, target_chat_id: int, user_id: int) -> schemas.CreatedResponse:
        payload = schemas.ForwardMessageRequest(
            original_message_id=original_message_id, target_chat_id=target_chat_id, user_id=user_id
        )
        return self._one(schemas.CreatedResponse, self._json("POST", "/messages/forward", payload))
