# tests/test_validation.py

from datetime import date

import pytest

from budgetwise_client.utils.errors import ValidationError
from budgetwise_client.utils.validation import (
    parse_date,
    validate_category,
    validate_password_change,
    validate_password_reset,
    validate_registration,
    validate_transaction,
)

TODAY = date(2024, 3, 5)


def errors_of(func, *args, **kwargs):
    with pytest.raises(ValidationError) as exc:
        func(*args, **kwargs)
    return exc.value.errors


def test_parse_date():
    assert parse_date("2024-01-02T10:00:00") == date(2024, 1, 2)
    assert parse_date(date(2024, 1, 2)) == date(2024, 1, 2)
    assert parse_date("not a date") is None
    assert parse_date("") is None


def test_transaction_requires_every_field():
    errors = errors_of(validate_transaction, {}, today=TODAY)
    assert set(errors) == {"amount", "type", "category_id", "date"}


def test_transaction_rejects_future_date_and_negative_amount():
    errors = errors_of(validate_transaction, {"amount": -5, "type": "income", "category_id": 1,
                                              "date": "2024-03-06"}, today=TODAY)
    assert errors == {"amount": "Amount must be positive", "date": "Date cannot be in the future"}


@pytest.mark.parametrize("amount", ["nan", "inf", float("nan"), float("-inf")])
def test_transaction_rejects_non_finite_amount(amount):
    errors = errors_of(validate_transaction, {"amount": amount, "type": "income", "category_id": 1,
                                              "date": "2024-03-01"}, today=TODAY)
    assert errors == {"amount": "Amount must be positive"}


def test_transaction_unknown_category():
    errors = errors_of(validate_transaction, {"amount": 5, "type": "income", "category_id": 7,
                                              "date": "2024-03-05"}, categories=[], today=TODAY)
    assert errors == {"category_id": "Unknown category"}


def test_transaction_cleaned_payload():
    payload = validate_transaction({"amount": "7", "type": "income", "category_id": "c1",
                                    "date": "2024-03-05"},
                                   categories=[{"_id": "c1", "type": "income"}], today=TODAY)
    assert payload == {"amount": 7.0, "type": "income", "category_id": "c1", "date": "2024-03-05", "note": ""}


@pytest.mark.parametrize("name,ok", [("ab", True), ("a", False), ("x" * 50, True), ("x" * 51, False)])
def test_category_name_length(name, ok):
    data = {"name": name, "type": "expense"}
    if ok:
        assert validate_category(data)["name"] == name
    else:
        assert "name" in errors_of(validate_category, data)


def test_category_type_required():
    assert errors_of(validate_category, {"name": "Food"}) == {"type": "Type is required"}


def test_registration_password_rules():
    base = {"username": "asha", "email": "asha@x.io"}
    assert "password" in errors_of(validate_registration, {**base, "password": "abcdefgh",
                                                           "confirm_password": "abcdefgh"})
    assert validate_registration({**base, "password": "abcd1234", "confirm_password": "abcd1234"})["username"] == "asha"


def test_password_reset_confirmation():
    assert errors_of(validate_password_reset, "abcd1234", "abcd12345") == {
        "confirm_password": "Passwords must match"}


def test_password_change_fields():
    errors = errors_of(validate_password_change, {"new_password": "abc", "confirm_password": "abc"})
    assert set(errors) == {"current_password", "new_password"}
