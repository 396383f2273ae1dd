# budgetwise_client/store/base.py
"""Generic resource slice: last-known server state plus request lifecycle.

Every async operation goes through the same vocabulary of transitions
(pending / fulfilled / rejected). Each dispatch is tagged with a sequence
number per operation kind, and a response that is not the latest issued
for its kind is dropped, so rapid re-dispatch cannot let an older answer
overwrite a newer one.
"""

import logging
import math
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ..api import ApiError
from ..config import DEFAULT_PER_PAGE
from ..models import entity_id, same_id

logger = logging.getLogger(__name__)

LIST = "list"
DETAIL = "detail"
CREATE = "create"
UPDATE = "update"
DELETE = "delete"

VERBS = {LIST: "fetch", DETAIL: "fetch", CREATE: "add", UPDATE: "update", DELETE: "delete"}


@dataclass
class SliceState:
    items: List[dict] = field(default_factory=list)
    selected: Optional[dict] = None
    total: int = 0
    page: int = 1
    pages: int = 0
    per_page: int = DEFAULT_PER_PAGE
    loading: bool = False
    error: Optional[str] = None
    success: bool = False
    message: Optional[str] = None
    extras: Dict[str, Any] = field(default_factory=dict)


class Observable:
    """Listener registry shared by slices and the auth gate."""

    name = "observable"

    def __init__(self):
        self._listeners = []
        self._lock = threading.RLock()

    def subscribe(self, listener: Callable) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self):
        for listener in list(self._listeners):
            try:
                listener(self.name, self.state)
            except Exception:
                logger.exception(f"Listener failed for {self.name}")


class ResourceSlice(Observable):
    name = "resource"
    list_key = "items"
    entity_key = None
    messages = {
        CREATE: "Item added successfully!",
        UPDATE: "Item updated successfully!",
        DELETE: "Item deleted successfully!",
    }

    def __init__(self, service=None, per_page=DEFAULT_PER_PAGE):
        super().__init__()
        self.service = service
        self.initial_per_page = per_page
        self.state = SliceState(per_page=per_page)
        self._latest = {}
        self._counter = 0

    # ---------------- Transitions ----------------
    def begin(self, op):
        """`pending`: returns the sequence number the response must present."""
        with self._lock:
            self._counter += 1
            seq = self._counter
            self._latest[op] = seq
            self.state.loading = True
            self.state.error = None
            if op in (CREATE, UPDATE):
                self.state.success = False
        self._notify()
        return seq

    def is_current(self, op, seq):
        return self._latest.get(op) == seq

    def resolve(self, op, seq, apply):
        """`fulfilled`: apply the response unless a newer dispatch superseded it."""
        with self._lock:
            if not self.is_current(op, seq):
                logger.debug(f"{self.name}: dropping stale {op} response #{seq}")
                return False
            self.state.loading = False
            apply(self.state)
        self._notify()
        return True

    def reject(self, op, seq, message):
        with self._lock:
            if not self.is_current(op, seq):
                logger.debug(f"{self.name}: dropping stale {op} failure #{seq}")
                return False
            self.state.loading = False
            self.state.error = message
        self._notify()
        return True

    def dispatch(self, op, call, apply, default_error=None, recover=None):
        """Run one service call through pending -> fulfilled/rejected.

        Failures are stored on the slice and never raised. `recover` may turn
        an ApiError into a substitute payload; returning None keeps the error.
        A response superseded by a newer dispatch of the same kind returns None.
        """
        default_error = default_error or f"Failed to {VERBS.get(op, op)} {self.name}"
        seq = self.begin(op)
        try:
            payload = call()
        except ApiError as e:
            payload = recover(e) if recover else None
            if payload is None:
                self.reject(op, seq, e.message or default_error)
                return None
        except Exception:
            logger.exception(f"{self.name}: unexpected error during {op}")
            self.reject(op, seq, default_error)
            return None
        if not self.resolve(op, seq, lambda state: apply(state, payload)):
            return None
        return payload

    # ---------------- Appliers ----------------
    def entity_from(self, payload):
        if not isinstance(payload, dict):
            return None
        if self.entity_key and isinstance(payload.get(self.entity_key), dict):
            return payload[self.entity_key]
        if entity_id(payload) is not None:
            return payload
        return None

    def items_from(self, payload):
        if isinstance(payload, list):
            return list(payload)
        payload = payload or {}
        items = payload.get("items")
        if items is None:
            items = payload.get(self.list_key) or []
        return list(items)

    def apply_list(self, state, payload):
        if isinstance(payload, list):
            items = payload
            state.items = list(items)
            state.total = len(items)
            state.page = 1
            state.pages = 1 if items else 0
            return
        payload = payload or {}
        items = self.items_from(payload)
        state.items = items
        state.total = int(payload.get("total", len(items)) or 0)
        state.page = int(payload.get("page", state.page) or 1)
        state.per_page = int(payload.get("per_page", state.per_page) or state.per_page)
        pages = payload.get("pages")
        if pages is None:
            pages = math.ceil(state.total / state.per_page) if state.per_page else 0
        state.pages = int(pages)

    def apply_detail(self, state, payload):
        state.selected = self.entity_from(payload) or payload

    def apply_create(self, state, payload):
        # the new entity shows up on the next list fetch, nothing is inserted here
        state.success = True
        state.message = self.messages[CREATE]

    def apply_update(self, state, item_id, payload, submitted=None):
        state.success = True
        state.message = self.messages[UPDATE]
        state.selected = None
        entity = self.entity_from(payload)
        for index, item in enumerate(state.items):
            if same_id(entity_id(item), item_id):
                if entity is not None:
                    state.items[index] = entity
                elif submitted:
                    state.items[index] = {**item, **submitted}
                break

    def apply_delete(self, state, item_ids):
        doomed = {str(i) for i in item_ids}
        state.items = [item for item in state.items if str(entity_id(item)) not in doomed]
        if state.selected is not None and str(entity_id(state.selected)) in doomed:
            state.selected = None
        state.message = self.messages[DELETE]

    # ---------------- Generic CRUD ----------------
    def _fetch_list(self, call):
        return self.dispatch(LIST, call, self.apply_list)

    def _fetch_one(self, call):
        return self.dispatch(DETAIL, call, self.apply_detail)

    def _create(self, call):
        return self.dispatch(CREATE, call, self.apply_create)

    def _update(self, item_id, call, submitted=None):
        return self.dispatch(UPDATE, call,
                             lambda state, payload: self.apply_update(state, item_id, payload, submitted))

    def _delete(self, item_id, call):
        return self.dispatch(DELETE, call, lambda state, payload: self.apply_delete(state, [item_id]))

    def find(self, item_id):
        for item in self.state.items:
            if same_id(entity_id(item), item_id):
                return item
        if self.state.selected is not None and same_id(entity_id(self.state.selected), item_id):
            return self.state.selected
        return None

    # ---------------- Local reducers ----------------
    def _mutate(self, **changes):
        with self._lock:
            for key, value in changes.items():
                setattr(self.state, key, value)
        self._notify()

    def clear_error(self):
        self._mutate(error=None)

    def clear_message(self):
        self._mutate(message=None, success=False)

    def set_page(self, page):
        self._mutate(page=max(int(page), 1))

    def set_per_page(self, per_page):
        self._mutate(per_page=max(int(per_page), 1), page=1)

    def reset(self):
        with self._lock:
            self.state = SliceState(per_page=self.initial_per_page)
            self._latest.clear()
        self._notify()

    def page_params(self, filters=None):
        """Filters with the slice's current page window filled in."""
        params = {"page": self.state.page, "per_page": self.state.per_page}
        params.update({k: v for k, v in (filters or {}).items() if v is not None})
        return params
