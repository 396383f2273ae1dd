# budgetwise_client/utils/validation.py
# form-level checks run before anything is dispatched

import math
import re
from datetime import date, datetime

from ..models import TRANSACTION_TYPES, entity_id, is_default_category, same_id
from .errors import ValidationError

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PASSWORD_RE = re.compile(r"^(?=.*[A-Za-z])(?=.*\d)[A-Za-z\d@$!%*#?&]{8,}$")

CATEGORY_NAME_MIN = 2
CATEGORY_NAME_MAX = 50
USERNAME_MIN = 3
PASSWORD_MIN = 8


def parse_date(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).strip()[:10]).date()
    except ValueError:
        return None


def _raise_if(errors):
    if errors:
        raise ValidationError(errors)


def validate_transaction(data, categories=None, today=None):
    """Cleaned transaction payload or ValidationError.

    When the category list is known, the chosen category must carry the
    same type as the transaction.
    """
    errors = {}
    today = today or date.today()

    amount = data.get("amount")
    try:
        amount = float(amount)
        if not math.isfinite(amount) or amount <= 0:
            errors["amount"] = "Amount must be positive"
    except (TypeError, ValueError):
        errors["amount"] = "Amount must be a number"

    tx_type = data.get("type")
    if tx_type not in TRANSACTION_TYPES:
        errors["type"] = "Type is required"

    category_id = data.get("category_id")
    if category_id in (None, ""):
        errors["category_id"] = "Category is required"
    elif categories is not None and tx_type in TRANSACTION_TYPES:
        match = next((c for c in categories if same_id(entity_id(c), category_id)), None)
        if match is None:
            errors["category_id"] = "Unknown category"
        elif match.get("type") != tx_type:
            errors["category_id"] = f"Category must be an {tx_type} category"

    tx_date = parse_date(data.get("date"))
    if tx_date is None:
        errors["date"] = "Date is required"
    elif tx_date > today:
        errors["date"] = "Date cannot be in the future"

    _raise_if(errors)
    return {
        "amount": amount,
        "type": tx_type,
        "category_id": category_id,
        "date": tx_date.isoformat(),
        "note": (data.get("note") or "").strip(),
    }


def validate_category(data, existing=None):
    errors = {}
    name = (data.get("name") or "").strip()
    if not name:
        errors["name"] = "Name is required"
    elif len(name) < CATEGORY_NAME_MIN:
        errors["name"] = f"Name must be at least {CATEGORY_NAME_MIN} characters"
    elif len(name) > CATEGORY_NAME_MAX:
        errors["name"] = f"Name must be less than {CATEGORY_NAME_MAX} characters"

    cat_type = data.get("type")
    if cat_type not in TRANSACTION_TYPES:
        errors["type"] = "Type is required"
    elif is_default_category(existing) and existing.get("type") != cat_type:
        errors["type"] = "The type of a default category cannot be changed"

    _raise_if(errors)
    return {"name": name, "type": cat_type}


def _password_errors(password, confirm, field="password", confirm_field="confirm_password"):
    errors = {}
    if not password:
        errors[field] = "Password is required"
    elif len(password) < PASSWORD_MIN:
        errors[field] = f"Password must be at least {PASSWORD_MIN} characters"
    elif not PASSWORD_RE.match(password):
        errors[field] = "Password must contain at least one letter and one number"
    if confirm != password:
        errors[confirm_field] = "Passwords must match"
    return errors


def validate_registration(data):
    errors = {}
    username = (data.get("username") or "").strip()
    if not username:
        errors["username"] = "Username is required"
    elif len(username) < USERNAME_MIN:
        errors["username"] = f"Username must be at least {USERNAME_MIN} characters"

    email = (data.get("email") or "").strip()
    if not email:
        errors["email"] = "Email is required"
    elif not EMAIL_RE.match(email):
        errors["email"] = "Enter a valid email"

    errors.update(_password_errors(data.get("password"), data.get("confirm_password")))
    _raise_if(errors)
    return {
        "username": username,
        "email": email,
        "password": data["password"],
        "first_name": (data.get("first_name") or "").strip(),
        "last_name": (data.get("last_name") or "").strip(),
    }


def validate_password_reset(password, confirm_password):
    _raise_if(_password_errors(password, confirm_password))
    return password


def validate_password_change(data):
    errors = {}
    if not data.get("current_password"):
        errors["current_password"] = "Current password is required"
    errors.update(_password_errors(data.get("new_password"), data.get("confirm_password"),
                                   field="new_password"))
    _raise_if(errors)
    return {"current_password": data["current_password"], "new_password": data["new_password"]}


def validate_profile(data):
    errors = {}
    cleaned = {}
    for field, label in (("first_name", "First name"), ("last_name", "Last name")):
        value = (data.get(field) or "").strip()
        if not value:
            errors[field] = f"{label} is required"
        cleaned[field] = value
    email = (data.get("email") or "").strip()
    if not email:
        errors["email"] = "Email is required"
    elif not EMAIL_RE.match(email):
        errors["email"] = "Invalid email address"
    cleaned["email"] = email
    _raise_if(errors)
    return cleaned
