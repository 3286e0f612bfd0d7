import json
import logging

import pytest

from chat_messenger import api, config

BASE_URL = "http://chat.test:18080"


class FakeResponse:
    def __init__(self, status_code=200, json_data=None, text=None):
        self.status_code = status_code
        self._json = json_data
        if text is None:
            text = json.dumps(json_data) if json_data is not None else ""
        self.text = text
        self.reason = "OK" if self.ok else "Bad Request"

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._json is None:
            raise ValueError("No JSON object could be decoded")
        return self._json


class FakeServer:
    """Stands in for ``requests.request``; routes are keyed by (method, path)."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, method, path, response):
        self.routes[(method, path)] = response

    def __call__(self, method, url, json=None, timeout=None):
        assert url.startswith(BASE_URL)
        path = url[len(BASE_URL):]
        self.calls.append((method, path, json))
        response = self.routes.get((method, path))
        if response is None:
            return FakeResponse(404, {"error": "Not found"})
        if isinstance(response, Exception):
            raise response
        return response

    def requests_to(self, method, path):
        return [body for m, p, body in self.calls if (m, p) == (method, path)]


@pytest.fixture(scope="session", autouse=True)
def isolated_log_file(tmp_path_factory):
    logger = logging.getLogger("chat_messenger")
    original = list(logger.handlers)
    for handler in original:
        logger.removeHandler(handler)
        handler.close()
    log_file = tmp_path_factory.mktemp("logs") / "client.log"
    handler = logging.FileHandler(log_file, delay=True)
    logger.addHandler(handler)
    yield log_file
    logger.removeHandler(handler)
    handler.close()


@pytest.fixture(autouse=True)
def isolated_storage(tmp_path, monkeypatch):
    storage_file = tmp_path / "client_state.json"
    monkeypatch.setattr(config, "STORAGE_FILE", storage_file)
    return storage_file


@pytest.fixture
def server(monkeypatch):
    fake = FakeServer()
    monkeypatch.setattr(api.requests, "request", fake)
    return fake
