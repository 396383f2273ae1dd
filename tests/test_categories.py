# tests/test_categories.py

import pytest

from budgetwise_client.utils.errors import ValidationError

CATEGORIES = [
    {"id": 1, "name": "Food", "type": "expense", "is_default": True},
    {"id": 2, "name": "Salary", "type": "income", "is_default": True},
    {"id": 3, "name": "Gifts", "type": "expense"},
]


@pytest.fixture
def categories(store, session):
    session.add("GET", "/categories/", json_data={"categories": [dict(c) for c in CATEGORIES]})
    store.categories.fetch_categories()
    return store.categories


def names(items):
    return [c["name"] for c in items]


def test_partitions_are_derived_from_one_list(categories):
    assert names(categories.income) == ["Salary"]
    assert names(categories.expense) == ["Food", "Gifts"]
    assert names(categories.of_type("income")) == ["Salary"]


def test_update_type_relocates_between_partitions(categories, session):
    session.add("PUT", "/categories/3/", json_data={"category": {"id": 3, "name": "Gifts", "type": "income"}})
    categories.update_category(3, {"name": "Gifts", "type": "income"})

    assert names(categories.income) == ["Salary", "Gifts"]
    assert names(categories.expense) == ["Food"]
    assert len(categories.state.items) == 3


def test_update_without_entity_in_response_still_relocates(categories, session):
    session.add("PUT", "/categories/3/", json_data={"message": "updated"})
    categories.update_category(3, {"name": "Presents", "type": "income"})
    assert names(categories.income) == ["Salary", "Presents"]


def test_default_category_type_cannot_change(categories, session):
    with pytest.raises(ValidationError) as exc:
        categories.update_category(1, {"name": "Food", "type": "income"})
    assert "type" in exc.value.errors
    assert session.last.method == "GET"


def test_default_category_can_be_renamed(categories, session):
    session.add("PUT", "/categories/1/", json_data={"category": {"id": 1, "name": "Meals", "type": "expense",
                                                                 "is_default": True}})
    categories.update_category(1, {"name": "Meals", "type": "expense"})
    assert names(categories.expense) == ["Meals", "Gifts"]


def test_delete_removes_from_every_partition(categories, session):
    session.add("DELETE", "/categories/3/", json_data={})
    categories.delete_category(3)
    assert names(categories.expense) == ["Food"]
    assert categories.state.message == "Category deleted successfully!"


def test_default_category_cannot_be_deleted(categories, session):
    with pytest.raises(ValidationError):
        categories.delete_category(2)
    assert categories.can_delete(CATEGORIES[2]) is True
    assert categories.can_change_type(CATEGORIES[0]) is False


def test_add_category_validates_name(store, session):
    with pytest.raises(ValidationError) as exc:
        store.categories.add_category({"name": " x ", "type": "expense"})
    assert exc.value.errors["name"] == "Name must be at least 2 characters"
    assert session.calls == []


def test_add_category_trims_name(store, session):
    session.add("POST", "/categories/", 201, {"category": {"id": 4}})
    store.categories.add_category({"name": "  Rent ", "type": "expense"})
    assert session.last.json == {"name": "Rent", "type": "expense"}
    assert store.categories.state.message == "Category added successfully!"


def test_fetch_by_type_passes_query(store, session):
    session.add("GET", "/categories/", json_data=[])
    store.categories.fetch_categories(type="expense")
    assert session.last.params == {"type": "expense"}


def test_created_category_lands_in_its_type_after_refetch(store, session):
    session.add("POST", "/categories/", 201, {"category": {"id": 4, "name": "Groceries", "type": "expense"}})
    session.add("GET", "/categories/", json_data={"categories": [dict(c) for c in CATEGORIES] + [
        {"id": 4, "name": "Groceries", "type": "expense"}]})

    store.categories.add_category({"name": "Groceries", "type": "expense"})
    assert "Groceries" not in names(store.categories.state.items)
    store.categories.fetch_categories()

    assert "Groceries" in names(store.categories.expense)
    assert "Groceries" not in names(store.categories.income)


def test_fetch_by_type_keeps_other_partition(store, session):
    session.add("GET", "/categories/", json_data={"categories": [dict(c) for c in CATEGORIES]})
    session.add("GET", "/categories/", json_data={"categories": [
        {"id": 2, "name": "Salary", "type": "income", "is_default": True},
        {"id": 5, "name": "Freelance", "type": "income"}]})

    store.categories.fetch_categories()
    store.categories.fetch_categories(type="income")

    assert names(store.categories.expense) == ["Food", "Gifts"]
    assert names(store.categories.income) == ["Salary", "Freelance"]
    assert store.categories.state.total == 4


def test_fetch_by_type_fills_in_missing_type(store, session):
    session.add("GET", "/categories/", json_data=[{"id": 6, "name": "Bonus"}])
    store.categories.fetch_categories(type="income")
    assert store.categories.income == [{"id": 6, "name": "Bonus", "type": "income"}]


def test_edit_keeps_default_category_type(categories, session):
    session.add("PUT", "/categories/2/", json_data={"message": "updated"})
    categories.update_category(2, {"name": "Wages", "type": "income"})
    assert session.last.json == {"name": "Wages", "type": "income"}
    assert names(categories.income) == ["Wages"]
