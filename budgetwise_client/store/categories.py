# budgetwise_client/store/categories.py

from ..models import EXPENSE, INCOME, is_default_category
from ..utils.errors import ValidationError
from ..utils.reports import partition_by_type
from ..utils.validation import validate_category
from .base import CREATE, DELETE, LIST, UPDATE, ResourceSlice


class CategorySlice(ResourceSlice):
    """One canonical category list; income/expense views are derived on read."""

    name = "categories"
    list_key = "categories"
    entity_key = "category"
    messages = {
        CREATE: "Category added successfully!",
        UPDATE: "Category updated successfully!",
        DELETE: "Category deleted successfully!",
    }

    @property
    def partitions(self):
        return partition_by_type(self.state.items)

    @property
    def income(self):
        return self.partitions[INCOME]

    @property
    def expense(self):
        return self.partitions[EXPENSE]

    def of_type(self, tx_type):
        return self.partitions.get(tx_type, [])

    @staticmethod
    def can_change_type(category):
        return not is_default_category(category)

    @staticmethod
    def can_delete(category):
        return not is_default_category(category)

    def fetch_categories(self, type=None):
        """Full load when `type` is None; otherwise only that type's entries are replaced."""
        if type is None:
            return self._fetch_list(lambda: self.service.list())

        def apply(state, payload):
            fetched = [{"type": type, **c} for c in self.items_from(payload)]
            fetched = [c for c in fetched if c["type"] == type]
            state.items = [c for c in state.items if c.get("type") != type] + fetched
            state.total = len(state.items)

        return self.dispatch(LIST, lambda: self.service.list(type), apply)

    def fetch_category(self, category_id):
        return self._fetch_one(lambda: self.service.get(category_id))

    def add_category(self, data):
        payload = validate_category(data)
        return self._create(lambda: self.service.create(payload))

    def update_category(self, category_id, data):
        """Name can always change; type only when the category is not a default one."""
        payload = validate_category(data, existing=self.find(category_id))
        return self._update(category_id, lambda: self.service.update(category_id, payload),
                            submitted=payload)

    def delete_category(self, category_id):
        # transactions keep their (now dangling) reference and render as uncategorized
        if not self.can_delete(self.find(category_id)):
            raise ValidationError({"category": "Default categories cannot be deleted"})
        return self._delete(category_id, lambda: self.service.delete(category_id))
