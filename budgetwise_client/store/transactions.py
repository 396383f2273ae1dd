# budgetwise_client/store/transactions.py

import logging

from ..utils.export import build_export, build_transactions_csv, check_format
from ..utils.validation import validate_transaction
from .base import CREATE, DELETE, UPDATE, ResourceSlice

logger = logging.getLogger(__name__)

RECENT = "recent"
SUGGESTIONS = "suggestions"
BULK_DELETE = "bulk_delete"
DUPLICATE = "duplicate"
EXPORT = "export"


class TransactionSlice(ResourceSlice):
    name = "transactions"
    list_key = "transactions"
    entity_key = "transaction"
    messages = {
        CREATE: "Transaction added successfully!",
        UPDATE: "Transaction updated successfully!",
        DELETE: "Transaction deleted successfully!",
    }

    def fetch_transactions(self, filters=None):
        return self._fetch_list(lambda: self.service.list(self.page_params(filters)))

    def search(self, filters=None):
        return self._fetch_list(lambda: self.service.search(self.page_params(filters)))

    def fetch_transaction(self, transaction_id):
        return self._fetch_one(lambda: self.service.get(transaction_id))

    def add_transaction(self, data, categories=None):
        """Validates first; a ValidationError is raised before anything is sent."""
        payload = validate_transaction(data, categories)
        return self._create(lambda: self.service.create(payload))

    def update_transaction(self, transaction_id, data, categories=None):
        payload = validate_transaction(data, categories)
        return self._update(transaction_id, lambda: self.service.update(transaction_id, payload),
                            submitted=payload)

    def delete_transaction(self, transaction_id):
        return self._delete(transaction_id, lambda: self.service.delete(transaction_id))

    def fetch_recent(self, limit=5):
        def apply(state, payload):
            if isinstance(payload, dict):
                items = payload.get("items", payload.get(self.list_key)) or []
            else:
                items = payload or []
            state.extras["recent"] = list(items)[:limit]

        return self.dispatch(RECENT, lambda: self.service.recent(limit), apply)

    def fetch_suggestions(self):
        def apply(state, payload):
            state.extras["suggestions"] = payload

        return self.dispatch(SUGGESTIONS, self.service.search_suggestions, apply)

    def bulk_delete(self, transaction_ids):
        ids = list(transaction_ids)

        def apply(state, payload):
            self.apply_delete(state, ids)
            state.success = True
            state.message = f"{len(ids)} transactions deleted successfully!"

        return self.dispatch(BULK_DELETE, lambda: self.service.bulk_delete(ids), apply)

    def duplicate(self, transaction_id):
        def apply(state, payload):
            state.success = True
            state.message = "Transaction duplicated successfully!"

        return self.dispatch(DUPLICATE, lambda: self.service.duplicate(transaction_id), apply)

    def export(self, fmt, filters=None, now=None):
        """Server export; for csv only, fall back to a report built from the loaded list."""
        check_format(fmt)

        def recover(error):
            if fmt != "csv":
                return None
            logger.warning(f"Server export failed ({error.message}), building csv locally")
            content = build_transactions_csv(self.state.items, filters=filters, now=now)
            return build_export(content, "csv", prefix="transactions", now=now, fallback=True)

        def apply(state, result):
            state.message = "Transactions exported successfully!"

        return self.dispatch(EXPORT, lambda: self.service.export(fmt, filters, now=now), apply,
                             recover=recover)
