# budgetwise_client/services/admin_service.py

from ..utils.export import build_export, check_format


class AdminService:
    """User management and system-wide statistics (admin role only)."""

    def __init__(self, api):
        self.api = api

    def list_users(self, page=1, per_page=10, search=""):
        return self.api.get("/admin/users/", params={"page": page, "per_page": per_page, "search": search},
                            default_error="Failed to fetch users")

    def get_user(self, user_id):
        return self.api.get(f"/admin/users/{user_id}/", default_error="Failed to fetch user")

    def toggle_user_status(self, user_id):
        return self.api.put(f"/admin/users/{user_id}/toggle-status/", default_error="Failed to toggle user status")

    def delete_user(self, user_id):
        return self.api.delete(f"/admin/users/{user_id}/", default_error="Failed to delete user")

    def list_transactions(self, filters=None):
        return self.api.get("/admin/transactions/", params=filters, default_error="Failed to fetch transactions")

    def system_stats(self):
        return self.api.get("/admin/stats/", default_error="Failed to fetch system statistics")

    def user_statistics(self, user_id, filters=None):
        return self.api.get(f"/admin/users/{user_id}/statistics", params=filters,
                            default_error="Failed to fetch user statistics")

    def generate_report(self, fmt, filters=None, now=None):
        check_format(fmt)
        body = {"format": fmt, **(filters or {})}
        content = self.api.post("/admin/generate-report", json=body, binary=True,
                                timeout=self.api.settings.export_timeout,
                                default_error="Failed to generate report")
        return build_export(content, fmt, prefix=f"admin_report_{fmt}", now=now, date_only=True)
