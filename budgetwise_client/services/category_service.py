# budgetwise_client/services/category_service.py


class CategoryService:
    def __init__(self, api):
        self.api = api

    def list(self, type=None):
        """All categories, optionally only those of one transaction type."""
        params = {"type": type} if type else {}
        return self.api.get("/categories/", params=params, default_error="Failed to fetch categories")

    def get(self, category_id):
        return self.api.get(f"/categories/{category_id}/", default_error="Failed to fetch category")

    def create(self, category_data):
        return self.api.post("/categories/", json=category_data, default_error="Failed to add category")

    def update(self, category_id, category_data):
        return self.api.put(f"/categories/{category_id}/", json=category_data,
                            default_error="Failed to update category")

    def delete(self, category_id):
        return self.api.delete(f"/categories/{category_id}/", default_error="Failed to delete category")
