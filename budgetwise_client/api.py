# budgetwise_client/api.py

import logging

import requests

from .config import Settings

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Request failed"
MESSAGE_KEYS = ("message", "msg", "error", "detail")
CODE_KEYS = ("code", "error_code")


class ApiError(Exception):
    """A failed request, normalised to a message the UI can show as-is."""

    def __init__(self, message, status_code=None, code=None, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.payload = payload or {}


# ---------------- Helpers ----------------
def safe_json(resp):
    try:
        return resp.json()
    except ValueError:
        return None


def extract_message(payload, default=GENERIC_ERROR):
    """First non-empty human-readable message in an error body."""
    if isinstance(payload, dict):
        for key in MESSAGE_KEYS:
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value
    return default


def extract_code(payload):
    if isinstance(payload, dict):
        for key in CODE_KEYS:
            if payload.get(key):
                return str(payload[key])
    return None


def clean_params(params):
    """Drop unset filters so they never reach the query string."""
    if not params:
        return {}
    return {k: v for k, v in params.items() if v is not None and v != ""}


class ApiClient:
    """Thin wrapper around a requests session bound to the REST backend.

    One call maps to exactly one HTTP request; nothing is retried.
    """

    def __init__(self, settings=None, session=None, token_provider=None):
        self.settings = settings or Settings()
        self.session = session or requests.Session()
        self.token_provider = token_provider

    def url(self, path):
        return self.settings.api_base.rstrip("/") + "/" + path.lstrip("/")

    def headers(self):
        headers = {"Accept": "application/json"}
        token = self.token_provider() if self.token_provider else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def request(self, method, path, params=None, json=None, default_error=GENERIC_ERROR,
                binary=False, timeout=None):
        method = method.upper()
        try:
            response = self.session.request(
                method,
                self.url(path),
                params=clean_params(params),
                json=json,
                headers=self.headers(),
                timeout=timeout or self.settings.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"{method} {path} failed: {e}")
            raise ApiError(default_error) from e

        if response.status_code >= 400:
            payload = safe_json(response) if not binary else _binary_error_body(response)
            message = extract_message(payload, default_error)
            logger.warning(f"{method} {path} returned {response.status_code}: {message}")
            raise ApiError(
                message,
                status_code=response.status_code,
                code=extract_code(payload),
                payload=payload if isinstance(payload, dict) else {},
            )

        if binary:
            return response.content
        if response.status_code == 204 or not response.content:
            return {}
        body = safe_json(response)
        return body if body is not None else {}

    def get(self, path, params=None, **kwargs):
        return self.request("GET", path, params=params, **kwargs)

    def post(self, path, json=None, **kwargs):
        return self.request("POST", path, json=json, **kwargs)

    def put(self, path, json=None, **kwargs):
        return self.request("PUT", path, json=json, **kwargs)

    def delete(self, path, json=None, **kwargs):
        return self.request("DELETE", path, json=json, **kwargs)


def _binary_error_body(response):
    # Export endpoints answer errors with JSON even when bytes were requested
    content_type = response.headers.get("Content-Type", "")
    if "json" in content_type:
        return safe_json(response)
    return None
