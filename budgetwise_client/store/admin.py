# budgetwise_client/store/admin.py

import logging

from ..models import entity_id, same_id
from ..utils.export import build_admin_report_csv, build_export, check_format
from .base import DELETE, ResourceSlice

logger = logging.getLogger(__name__)

TOGGLE_STATUS = "toggle_status"
SYSTEM_STATS = "system_stats"
USER_STATISTICS = "user_statistics"
REPORT = "report"


class AdminUserSlice(ResourceSlice):
    name = "admin_users"
    list_key = "users"
    entity_key = "user"
    messages = {**ResourceSlice.messages, DELETE: "User deleted successfully!"}

    def fetch_users(self, page=1, per_page=None, search=""):
        per_page = per_page or self.state.per_page
        return self._fetch_list(lambda: self.service.list_users(page, per_page, search))

    def fetch_user(self, user_id):
        return self._fetch_one(lambda: self.service.get_user(user_id))

    def toggle_user_status(self, user_id):
        def apply(state, payload):
            is_active = bool((payload or {}).get("is_active"))
            for user in state.items:
                if same_id(entity_id(user), user_id):
                    user["is_active"] = is_active
            if state.selected is not None and same_id(entity_id(state.selected), user_id):
                state.selected["is_active"] = is_active
            state.success = True
            state.message = f"User {'activated' if is_active else 'deactivated'} successfully!"

        return self.dispatch(TOGGLE_STATUS, lambda: self.service.toggle_user_status(user_id), apply)

    def delete_user(self, user_id):
        return self._delete(user_id, lambda: self.service.delete_user(user_id))


class AdminTransactionSlice(ResourceSlice):
    """Transactions across every user, same filter vocabulary as the personal list."""

    name = "admin_transactions"
    list_key = "transactions"
    entity_key = "transaction"

    def fetch_transactions(self, filters=None):
        return self._fetch_list(lambda: self.service.list_transactions(self.page_params(filters)))


class AdminStatsSlice(ResourceSlice):
    name = "admin_stats"

    def __init__(self, service=None, transactions_source=None, **kwargs):
        super().__init__(service, **kwargs)
        self.transactions_source = transactions_source or (lambda: [])

    @property
    def system_stats(self):
        return self.state.extras.get("system_stats") or {}

    @property
    def user_statistics(self):
        return self.state.extras.get("user_statistics") or {}

    def fetch_system_stats(self):
        def apply(state, payload):
            state.extras["system_stats"] = payload

        return self.dispatch(SYSTEM_STATS, self.service.system_stats, apply)

    def fetch_user_statistics(self, user_id, filters=None):
        def apply(state, payload):
            state.extras["user_statistics"] = payload

        return self.dispatch(USER_STATISTICS, lambda: self.service.user_statistics(user_id, filters), apply)

    def generate_report(self, fmt, filters=None, now=None):
        """Server-generated report; csv falls back to one built from loaded stats and transactions."""
        check_format(fmt)

        def recover(error):
            if fmt != "csv":
                return None
            logger.warning(f"Report generation failed ({error.message}), building csv locally")
            content = build_admin_report_csv(self.system_stats, self.transactions_source(),
                                             filters=filters, now=now)
            return build_export(content, "csv", prefix="admin_report", now=now, fallback=True,
                                date_only=True)

        def apply(state, result):
            state.message = f"{fmt.upper()} report generated successfully!"

        return self.dispatch(REPORT, lambda: self.service.generate_report(fmt, filters, now=now), apply,
                             recover=recover)
