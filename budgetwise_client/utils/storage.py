# budgetwise_client/utils/storage.py

import json
import logging
import os

logger = logging.getLogger(__name__)


class FileStorage:
    """Durable key/value storage in a single JSON file (token, user snapshot)."""

    def __init__(self, path):
        self.path = path

    def load_data(self):
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return data if isinstance(data, dict) else {}
        except (json.JSONDecodeError, OSError) as e:
            # corrupted file: start from an empty session
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return {}

    def save_data(self, data):
        os.makedirs(os.path.dirname(os.path.abspath(self.path)), exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=4)

    def get(self, key, default=None):
        return self.load_data().get(key, default)

    def set(self, key, value):
        data = self.load_data()
        data[key] = value
        self.save_data(data)

    def remove(self, key):
        data = self.load_data()
        if key in data:
            del data[key]
            self.save_data(data)


class MemoryStorage:
    """Same surface as FileStorage, kept in a dict."""

    def __init__(self, initial=None):
        self.data = dict(initial or {})

    def get(self, key, default=None):
        return self.data.get(key, default)

    def set(self, key, value):
        self.data[key] = value

    def remove(self, key):
        self.data.pop(key, None)


class SessionStateStorage:
    """Storage inside one browser session's `st.session_state` (any mutable mapping works).

    Keys are prefixed so they cannot collide with widget state.
    """

    def __init__(self, state, prefix="budgetwise_"):
        self.state = state
        self.prefix = prefix

    def get(self, key, default=None):
        return self.state.get(self.prefix + key, default)

    def set(self, key, value):
        self.state[self.prefix + key] = value

    def remove(self, key):
        self.state.pop(self.prefix + key, None)
