# budgetwise_client/models.py
# lightweight data-transfer shapes: entities travel as plain dicts from the API

INCOME = "income"
EXPENSE = "expense"
TRANSACTION_TYPES = (INCOME, EXPENSE)

ROLE_USER = "user"
ROLE_ADMIN = "admin"

EXPORT_FORMATS = ("pdf", "excel", "csv")

UNCATEGORIZED = "Uncategorized"


def entity_id(entity):
    """Server identifier of an entity; the backend emits either `id` or `_id`."""
    if not isinstance(entity, dict):
        return entity
    if entity.get("id") is not None:
        return entity["id"]
    return entity.get("_id")


def same_id(left, right):
    return left is not None and right is not None and str(left) == str(right)


def is_default_category(category):
    return bool(category and category.get("is_default"))
