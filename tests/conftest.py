# tests/conftest.py

import json
from collections import namedtuple

import pytest

from budgetwise_client.api import ApiClient
from budgetwise_client.config import Settings
from budgetwise_client.store import Store
from budgetwise_client.utils.storage import MemoryStorage

API_BASE = "http://api.test"

Call = namedtuple("Call", "method path params json headers timeout")


class FakeResponse:
    def __init__(self, status_code=200, json_data=None, content=None, headers=None):
        self.status_code = status_code
        self._json = json_data
        if content is None:
            content = json.dumps(json_data).encode("utf-8") if json_data is not None else b""
        self.content = content
        self.headers = headers or {"Content-Type": "application/json"}

    def json(self):
        if self._json is None:
            raise ValueError("No JSON body")
        return self._json


class FakeSession:
    """Stands in for requests.Session: canned responses per (method, path), every call recorded.

    Queued responses are served in order; the last one is repeated.
    An Exception instance in the queue is raised instead of returned.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, method, path, status_code=200, json_data=None, **kwargs):
        response = kwargs.pop("response", None) or FakeResponse(status_code, json_data, **kwargs)
        self.routes.setdefault((method.upper(), path), []).append(response)
        return response

    def request(self, method, url, params=None, json=None, headers=None, timeout=None):
        path = url[len(API_BASE):]
        self.calls.append(Call(method, path, params, json, headers, timeout))
        queue = self.routes.get((method, path))
        if not queue:
            return FakeResponse(404, {"message": f"No route for {method} {path}"})
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def last(self):
        return self.calls[-1]


@pytest.fixture
def settings(tmp_path):
    return Settings(
        api_base=API_BASE,
        timeout=10,
        export_timeout=120,
        session_file=str(tmp_path / "session.json"),
        search_debounce=0.5,
        per_page=10,
    )


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def api(settings, session):
    return ApiClient(settings, session=session, token_provider=lambda: "test-token")


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(settings, storage, session):
    """Isolated store per test: fake HTTP, in-memory session storage."""
    return Store(settings=settings, storage=storage, session=session)


@pytest.fixture
def logged_in_store(settings, session):
    storage = MemoryStorage({"token": "abc", "user": {"id": 1, "username": "asha", "role": "user"}})
    return Store(settings=settings, storage=storage, session=session)


def tx(id, amount, type="expense", date="2024-01-15", category_id=None, category_name=None, note=""):
    """Transaction dict shaped like the API's."""
    return {
        "id": id,
        "amount": amount,
        "type": type,
        "date": date,
        "category_id": category_id,
        "category_name": category_name,
        "note": note,
    }
