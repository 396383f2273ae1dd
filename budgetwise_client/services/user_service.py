# budgetwise_client/services/user_service.py


class UserService:
    """Current user's profile, password and dashboard statistics."""

    def __init__(self, api):
        self.api = api

    def get_profile(self):
        return self.api.get("/user/profile/", default_error="Failed to fetch profile")

    def update_profile(self, profile_data):
        return self.api.put("/user/profile/", json=profile_data, default_error="Failed to update profile")

    def change_password(self, password_data):
        return self.api.put("/user/change-password/", json=password_data,
                            default_error="Failed to change password")

    def delete_account(self, password):
        return self.api.delete("/user/delete-account/", json={"password": password},
                               default_error="Failed to delete account")

    def dashboard_stats(self, range="month"):
        return self.api.get("/user/dashboard/", params={"range": range},
                            default_error="Failed to fetch dashboard statistics")
