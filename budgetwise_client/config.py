# budgetwise_client/config.py

import os
from dataclasses import dataclass
from typing import Optional

# ---------------- Environment ----------------
API_BASE = os.environ.get("BUDGETWISE_API_BASE", "http://localhost:5000")
REQUEST_TIMEOUT = float(os.environ.get("BUDGETWISE_TIMEOUT", 10))
EXPORT_TIMEOUT = float(os.environ.get("BUDGETWISE_EXPORT_TIMEOUT", 120))
# unset: the session lives only as long as the Store (or the browser session)
SESSION_FILE = os.environ.get("BUDGETWISE_SESSION_FILE")
LOG_LEVEL = os.environ.get("BUDGETWISE_LOG_LEVEL", "INFO")
SEARCH_DEBOUNCE_SECONDS = float(os.environ.get("BUDGETWISE_SEARCH_DEBOUNCE", 0.5))
DEFAULT_PER_PAGE = int(os.environ.get("BUDGETWISE_PER_PAGE", 10))

# ---------------- Fixed constants ----------------
TOKEN_KEY = "token"
USER_KEY = "user"
ADMIN_ROLE = "admin"
LOGIN_ROUTE = "/login"
DEFAULT_ROUTE = "/dashboard"
FORGOT_PASSWORD_ROUTE = "/forgot-password"
CSV_SAMPLE_LIMIT = 50


@dataclass
class Settings:
    """Connection and UI settings handed to the API client and the store."""
    api_base: str = API_BASE
    timeout: float = REQUEST_TIMEOUT
    export_timeout: float = EXPORT_TIMEOUT
    session_file: Optional[str] = SESSION_FILE
    search_debounce: float = SEARCH_DEBOUNCE_SECONDS
    per_page: int = DEFAULT_PER_PAGE


def load_settings(**overrides):
    """Settings from the environment, with keyword overrides applied on top."""
    return Settings(**overrides)
