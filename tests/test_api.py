# tests/test_api.py

import pytest
import requests

from budgetwise_client.api import ApiClient, ApiError, clean_params, extract_code, extract_message

from conftest import FakeResponse


def test_extract_message_key_order():
    assert extract_message({"detail": "d", "error": "e", "msg": "m"}) == "m"
    assert extract_message({"error": "e", "detail": "d"}) == "e"
    assert extract_message({"message": "  ", "detail": "d"}) == "d"
    assert extract_message({}, "fallback") == "fallback"
    assert extract_message(None, "fallback") == "fallback"


def test_extract_code():
    assert extract_code({"code": "token_used"}) == "token_used"
    assert extract_code({"error_code": 42}) == "42"
    assert extract_code({"message": "x"}) is None


def test_clean_params_drops_unset_values():
    assert clean_params({"a": 1, "b": None, "c": "", "d": 0}) == {"a": 1, "d": 0}
    assert clean_params(None) == {}


def test_request_sends_bearer_token_and_timeout(api, session):
    session.add("GET", "/transactions/", json_data={"items": []})
    assert api.get("/transactions/", params={"page": 1, "search": ""}) == {"items": []}

    call = session.last
    assert call.method == "GET"
    assert call.params == {"page": 1}
    assert call.headers["Authorization"] == "Bearer test-token"
    assert call.timeout == 10


def test_no_token_no_authorization_header(settings, session):
    client = ApiClient(settings, session=session, token_provider=lambda: None)
    session.add("GET", "/categories/", json_data=[])
    client.get("/categories/")
    assert "Authorization" not in session.last.headers


def test_error_status_raises_api_error_with_server_message(api, session):
    session.add("POST", "/auth/login/", 401, {"message": "Invalid credentials", "code": "invalid_credentials"})
    with pytest.raises(ApiError) as exc:
        api.post("/auth/login/", json={"username": "a"}, default_error="Login failed")
    assert exc.value.message == "Invalid credentials"
    assert exc.value.status_code == 401
    assert exc.value.code == "invalid_credentials"
    assert exc.value.payload["message"] == "Invalid credentials"


def test_error_without_body_uses_default_message(api, session):
    session.add("DELETE", "/categories/1/", response=FakeResponse(500, None, content=b"<html>oops</html>",
                                                                   headers={"Content-Type": "text/html"}))
    with pytest.raises(ApiError) as exc:
        api.delete("/categories/1/", default_error="Failed to delete category")
    assert exc.value.message == "Failed to delete category"
    assert exc.value.payload == {}


def test_transport_failure_becomes_api_error(api, session):
    session.add("GET", "/user/profile/", response=requests.ConnectionError("refused"))
    with pytest.raises(ApiError) as exc:
        api.get("/user/profile/", default_error="Failed to fetch profile")
    assert exc.value.message == "Failed to fetch profile"
    assert exc.value.status_code is None


def test_empty_and_204_bodies_return_empty_dict(api, session):
    session.add("DELETE", "/transactions/3/", response=FakeResponse(204, None))
    assert api.delete("/transactions/3/") == {}


def test_binary_request_returns_raw_bytes(api, session):
    session.add("GET", "/transactions/export/",
                response=FakeResponse(200, None, content=b"%PDF-1.4", headers={"Content-Type": "application/pdf"}))
    assert api.get("/transactions/export/", binary=True, timeout=120) == b"%PDF-1.4"
    assert session.last.timeout == 120


def test_binary_error_body_parsed_when_json(api, session):
    session.add("GET", "/transactions/export/", 400, {"error": "No transactions to export"})
    with pytest.raises(ApiError) as exc:
        api.get("/transactions/export/", binary=True, default_error="Failed to export")
    assert exc.value.message == "No transactions to export"
