# budgetwise_client/store/profile.py

from ..utils.validation import validate_password_change, validate_profile
from .base import UPDATE, ResourceSlice

CHANGE_PASSWORD = "change_password"
DELETE_ACCOUNT = "delete_account"
STATS = "stats"


class ProfileSlice(ResourceSlice):
    """The signed-in user's own profile; `selected` holds the profile snapshot."""

    name = "profile"
    entity_key = "user"

    def __init__(self, service=None, on_profile_updated=None, on_account_deleted=None, **kwargs):
        super().__init__(service, **kwargs)
        self.on_profile_updated = on_profile_updated
        self.on_account_deleted = on_account_deleted

    @property
    def profile(self):
        return self.state.selected

    def fetch_profile(self):
        return self._fetch_one(self.service.get_profile)

    def update_profile(self, data):
        payload = validate_profile(data)

        def apply(state, response):
            state.success = True
            state.message = "Profile updated successfully!"
            state.selected = {**(state.selected or {}), **payload, **(self.entity_from(response) or {})}

        result = self.dispatch(UPDATE, lambda: self.service.update_profile(payload), apply)
        if result is not None and self.on_profile_updated:
            self.on_profile_updated(payload)
        return result

    def change_password(self, data):
        payload = validate_password_change(data)

        def apply(state, response):
            state.success = True
            state.message = "Password changed successfully!"

        return self.dispatch(CHANGE_PASSWORD, lambda: self.service.change_password(payload), apply)

    def delete_account(self, password):
        def apply(state, response):
            state.extras["account_deleted"] = True
            state.message = "Account deleted successfully!"

        result = self.dispatch(DELETE_ACCOUNT, lambda: self.service.delete_account(password), apply)
        if result is not None and self.on_account_deleted:
            self.on_account_deleted()
        return result

    def fetch_dashboard_stats(self, range="month"):
        def apply(state, response):
            state.extras["stats"] = response

        return self.dispatch(STATS, lambda: self.service.dashboard_stats(range), apply)

