# budgetwise_client/store/__init__.py
"""The application store: one container holding every slice and the auth gate.

Build one `Store` per session (or per test) instead of sharing module-level
state; the API client inside reads its bearer token from the auth gate.
"""

import logging

from ..api import ApiClient
from ..config import load_settings
from ..services import AdminService, AuthService, CategoryService, TransactionService, UserService
from ..utils.debounce import Debouncer
from ..utils.storage import FileStorage, MemoryStorage
from .admin import AdminStatsSlice, AdminTransactionSlice, AdminUserSlice
from .auth import AuthGate
from .categories import CategorySlice
from .profile import ProfileSlice
from .transactions import TransactionSlice

logger = logging.getLogger(__name__)


class Store:
    def __init__(self, settings=None, storage=None, session=None):
        self.settings = settings or load_settings()
        self.storage = storage if storage is not None else self._default_storage()

        self.api = ApiClient(self.settings, session=session, token_provider=self._token)
        self.auth = AuthGate(AuthService(self.api), self.storage)

        per_page = self.settings.per_page
        self.transactions = TransactionSlice(TransactionService(self.api), per_page=per_page)
        self.categories = CategorySlice(CategoryService(self.api), per_page=per_page)
        self.profile = ProfileSlice(UserService(self.api),
                                    on_profile_updated=self.auth.update_user,
                                    on_account_deleted=self._account_deleted,
                                    per_page=per_page)

        admin = AdminService(self.api)
        self.admin_users = AdminUserSlice(admin, per_page=per_page)
        self.admin_transactions = AdminTransactionSlice(admin, per_page=per_page)
        self.admin_stats = AdminStatsSlice(admin, transactions_source=lambda: self.admin_transactions.state.items,
                                           per_page=per_page)

    def _default_storage(self):
        # a shared file is only used when one is configured explicitly
        if self.settings.session_file:
            return FileStorage(self.settings.session_file)
        return MemoryStorage()

    def _token(self):
        return self.auth.state.token

    @property
    def slices(self):
        return {
            s.name: s
            for s in (self.transactions, self.categories, self.profile,
                      self.admin_users, self.admin_transactions, self.admin_stats)
        }

    def subscribe(self, listener):
        """Listen to every slice and the auth gate; returns one unsubscribe for all."""
        unsubscribers = [s.subscribe(listener) for s in self.slices.values()]
        unsubscribers.append(self.auth.subscribe(listener))

        def unsubscribe():
            for unsub in unsubscribers:
                unsub()

        return unsubscribe

    def debounce(self, func, **kwargs):
        return Debouncer(func, interval=self.settings.search_debounce, **kwargs)

    def reset(self):
        for s in self.slices.values():
            s.reset()

    def logout(self):
        logger.info("Logging out, clearing session and cached data")
        self.auth.logout()
        self.reset()

    def _account_deleted(self):
        self.auth.account_deleted()
        self.reset()
