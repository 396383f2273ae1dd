# budgetwise_client/utils/reports.py
"""Derived views over a loaded transaction snapshot.

Everything here is pure: same snapshot in, same aggregates out, nothing
cached. Empty input always yields the zero/empty result.
"""

import math

import pandas as pd

from ..models import EXPENSE, INCOME, UNCATEGORIZED, entity_id, same_id

FRAME_COLUMNS = ["date", "amount", "type", "category", "description"]


# ---------------- Snapshot -> DataFrame ----------------
def category_label(tx, categories=None, fallback=UNCATEGORIZED):
    """Display name of a transaction's category.

    A dangling reference (the category was deleted) falls back to the
    uncategorized label instead of failing.
    """
    name = tx.get("category_name")
    if name:
        return name
    category = tx.get("category")
    if isinstance(category, dict) and category.get("name"):
        return category["name"]
    category_id = tx.get("category_id")
    if category_id is None and category is not None and not isinstance(category, dict):
        category_id = category
    if category_id is not None and categories:
        for cat in categories:
            if same_id(entity_id(cat), category_id):
                return cat.get("name") or fallback
    return fallback


def to_frame(transactions, categories=None):
    """DataFrame with parsed dates and numeric amounts; invalid amounts dropped."""
    if not transactions:
        return pd.DataFrame(columns=FRAME_COLUMNS)

    rows = []
    for tx in transactions:
        rows.append({
            "date": str(tx.get("date") or "")[:10],
            "amount": tx.get("amount"),
            "type": tx.get("type"),
            "category": category_label(tx, categories),
            "description": tx.get("note") or tx.get("description") or "",
        })
    df = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    df["date"] = pd.to_datetime(df["date"], format="%Y-%m-%d", errors="coerce")
    df["amount"] = pd.to_numeric(df["amount"], errors="coerce")
    return df.dropna(subset=["amount"]).reset_index(drop=True)


def _round(value):
    return round(float(value), 2)


# ---------------- Totals ----------------
def totals_by_type(transactions):
    df = to_frame(transactions)
    if df.empty:
        return {"income": 0.0, "expense": 0.0, "balance": 0.0, "count": 0}

    income = _round(math.fsum(df.loc[df["type"] == INCOME, "amount"]))
    expense = _round(math.fsum(df.loc[df["type"] == EXPENSE, "amount"]))
    return {
        "income": income,
        "expense": expense,
        "balance": income - expense,
        "count": int(len(df)),
    }


def average_transaction(transactions):
    totals = totals_by_type(transactions)
    return (totals["income"] + totals["expense"]) / max(totals["count"], 1)


# ---------------- Grouping ----------------
def group_by_category(transactions, categories=None, tx_type=EXPENSE):
    """[{name, value}] per category label, in first-encounter order."""
    df = to_frame(transactions, categories)
    if df.empty:
        return []
    df = df[df["type"] == tx_type]
    if df.empty:
        return []
    sums = df.groupby("category", sort=False)["amount"].sum()
    return [{"name": name, "value": _round(value)} for name, value in sums.items()]


def _group_by_period(transactions, fmt, key):
    df = to_frame(transactions).dropna(subset=["date"])
    if df.empty:
        return []
    df[key] = df["date"].dt.strftime(fmt)
    income = df[df["type"] == INCOME].groupby(key)["amount"].sum()
    expense = df[df["type"] == EXPENSE].groupby(key)["amount"].sum()

    buckets = []
    for period in sorted(df[key].unique()):
        inc = _round(income.get(period, 0.0))
        exp = _round(expense.get(period, 0.0))
        buckets.append({key: period, "income": inc, "expense": exp, "net": inc - exp})
    return buckets


def group_by_month(transactions):
    """[{month: 'YYYY-MM', income, expense, net}] ascending by month."""
    return _group_by_period(transactions, "%Y-%m", "month")


def group_by_day(transactions):
    return _group_by_period(transactions, "%Y-%m-%d", "date")


def partition_by_type(categories):
    """Income/expense views of one canonical category list."""
    partitions = {INCOME: [], EXPENSE: []}
    for category in categories or []:
        partitions.setdefault(category.get("type"), []).append(category)
    return partitions


# ---------------- Ranking ----------------
def rank(items, key="value", limit=None):
    """Descending by `key`; ties keep their original order."""
    ranked = sorted(items or [], key=lambda item: float(item.get(key) or 0), reverse=True)
    return ranked[:limit] if limit is not None else ranked


def percentages(items, key="value"):
    total = math.fsum(float(item.get(key) or 0) for item in items or [])
    result = []
    for item in items or []:
        share = (float(item.get(key) or 0) / total * 100) if total else 0.0
        result.append({**item, "percentage": round(share, 2)})
    return result


# ---------------- Filtering ----------------
def _as_date(value):
    if value in (None, ""):
        return None
    return pd.to_datetime(str(value)[:10], format="%Y-%m-%d", errors="coerce")


def filter_transactions(transactions, search=None, tx_type=None, category_id=None,
                        date_from=None, date_to=None, min_amount=None, max_amount=None):
    """Client-side filter over an already-loaded snapshot; order preserved."""
    start, end = _as_date(date_from), _as_date(date_to)
    needle = (search or "").strip().lower()
    result = []
    for tx in transactions or []:
        if tx_type and tx.get("type") != tx_type:
            continue
        if category_id is not None and not same_id(tx.get("category_id"), category_id):
            continue
        amount = float(tx.get("amount") or 0)
        if min_amount is not None and amount < float(min_amount):
            continue
        if max_amount is not None and amount > float(max_amount):
            continue
        if start is not None or end is not None:
            when = _as_date(tx.get("date"))
            if when is None or pd.isna(when):
                continue
            if start is not None and when < start:
                continue
            if end is not None and when > end:
                continue
        if needle:
            text = " ".join(str(tx.get(k) or "") for k in ("note", "description", "category_name")).lower()
            if needle not in text:
                continue
        result.append(tx)
    return result


# ---------------- Report bundle ----------------
def build_report(transactions, categories=None):
    """Everything the reports page charts."""
    totals = totals_by_type(transactions)
    by_category = percentages(rank(group_by_category(transactions, categories)))
    return {
        "summary": totals,
        "average": average_transaction(transactions),
        "monthly": group_by_month(transactions),
        "daily": group_by_day(transactions),
        "categories": by_category,
    }
