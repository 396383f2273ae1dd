# budgetwise_client/services/transaction_service.py

from ..utils.export import build_export, check_format


class TransactionService:
    """CRUD, search and export against /transactions/."""

    def __init__(self, api):
        self.api = api

    def list(self, filters=None):
        return self.api.get("/transactions/", params=filters, default_error="Failed to fetch transactions")

    def get(self, transaction_id):
        return self.api.get(f"/transactions/{transaction_id}/", default_error="Failed to fetch transaction")

    def create(self, transaction_data):
        return self.api.post("/transactions/", json=transaction_data, default_error="Failed to add transaction")

    def update(self, transaction_id, transaction_data):
        return self.api.put(f"/transactions/{transaction_id}/", json=transaction_data,
                            default_error="Failed to update transaction")

    def delete(self, transaction_id):
        return self.api.delete(f"/transactions/{transaction_id}/", default_error="Failed to delete transaction")

    def recent(self, limit=5):
        return self.api.get("/transactions/", params={"page": 1, "per_page": limit},
                            default_error="Failed to fetch recent transactions")

    def search(self, filters=None):
        return self.api.get("/transactions/search/", params=filters, default_error="Failed to search transactions")

    def search_suggestions(self):
        return self.api.get("/transactions/search-suggestions/", default_error="Failed to fetch search suggestions")

    def bulk_delete(self, transaction_ids):
        return self.api.post("/transactions/bulk-delete/", json={"transaction_ids": list(transaction_ids)},
                             default_error="Failed to delete transactions")

    def duplicate(self, transaction_id):
        return self.api.post(f"/transactions/duplicate/{transaction_id}/",
                             default_error="Failed to duplicate transaction")

    def export(self, fmt, filters=None, now=None):
        """Binary export; the caller gets bytes plus the MIME type and filename for `fmt`."""
        check_format(fmt)
        params = {"format": fmt, **(filters or {})}
        content = self.api.get("/transactions/export/", params=params, binary=True,
                               timeout=self.api.settings.export_timeout,
                               default_error="Failed to export transactions")
        return build_export(content, fmt, prefix="transactions", now=now)
