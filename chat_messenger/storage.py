"""Local client storage for the server URL and last used login."""
import json
from typing import Any, Dict, Optional

from . import config
from .logging_config import configure_logging

logger = configure_logging()


def load_state() -> Dict[str, Any]:
    if not config.STORAGE_FILE.exists():
        return {}
    try:
        with config.STORAGE_FILE.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except ValueError as exc:
        logger.warning("STATE_UNREADABLE path=%s error=%s", config.STORAGE_FILE, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("STATE_UNREADABLE path=%s error=not an object", config.STORAGE_FILE)
        return {}
    return data


def save_state(data: Dict[str, Any]) -> None:
    config.STORAGE_FILE.parent.mkdir(parents=True, exist_ok=True)
    with config.STORAGE_FILE.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def store_server_url(url: str) -> None:
    state = load_state()
    state["server_url"] = url
    save_state(state)


def get_server_url() -> Optional[str]:
    return load_state().get("server_url")


def store_last_login(login: str) -> None:
    state = load_state()
    state["last_login"] = login
    save_state(state)


def get_last_login() -> Optional[str]:
    return load_state().get("last_login")


def clear_last_login() -> None:
    state = load_state()
    state.pop("last_login", None)
    save_state(state)
