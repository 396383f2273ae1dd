# budgetwise_client/utils/export.py

import csv
import io
from dataclasses import dataclass
from datetime import datetime

from ..config import CSV_SAMPLE_LIMIT
from ..models import EXPORT_FORMATS, UNCATEGORIZED
from .formatting import format_currency
from .reports import (
    average_transaction,
    group_by_category,
    group_by_month,
    percentages,
    rank,
    totals_by_type,
)

MIME_TYPES = {
    "pdf": "application/pdf",
    "excel": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "csv": "text/csv",
}

EXTENSIONS = {"pdf": "pdf", "excel": "xlsx", "csv": "csv"}


@dataclass
class ExportResult:
    content: bytes
    format: str
    mime_type: str
    filename: str
    fallback: bool = False


def _money(value):
    return format_currency(value, grouping=False)


def check_format(fmt):
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format: {fmt!r} (expected one of {', '.join(EXPORT_FORMATS)})")
    return fmt


def mime_type_for(fmt):
    return MIME_TYPES[check_format(fmt)]


def export_filename(prefix, fmt, now=None, date_only=False):
    """`transactions_20240305T101112.xlsx` style names; `date_only` gives `..._2024-03-05.csv`."""
    now = now or datetime.now()
    stamp = now.strftime("%Y-%m-%d") if date_only else now.strftime("%Y%m%dT%H%M%S")
    return f"{prefix}_{stamp}.{EXTENSIONS[check_format(fmt)]}"


def build_export(content, fmt, prefix="transactions", now=None, fallback=False, date_only=False):
    if isinstance(content, str):
        content = content.encode("utf-8")
    return ExportResult(
        content=content,
        format=fmt,
        mime_type=mime_type_for(fmt),
        filename=export_filename(prefix, fmt, now=now, date_only=date_only),
        fallback=fallback,
    )


# ---------------- CSV synthesis ----------------
def clean_field(value):
    """Commas become semicolons so a value can never shift the columns."""
    if value is None:
        return ""
    text = str(value).replace(",", ";")
    return text.replace("\r", " ").replace("\n", " ")


class _Sections:
    def __init__(self):
        self.buffer = io.StringIO()
        self.writer = csv.writer(self.buffer, lineterminator="\n")

    def row(self, *values):
        self.writer.writerow([clean_field(v) for v in values])

    def blank(self):
        self.buffer.write("\n")

    def text(self):
        return self.buffer.getvalue()


def _describe_filters(filters):
    applied = {k: v for k, v in (filters or {}).items() if v not in (None, "")}
    if not applied:
        return "None"
    return "; ".join(f"{k}={v}" for k, v in sorted(applied.items()))


def _tx_date(tx):
    value = tx.get("date") or ""
    return str(value)[:10]


def build_transactions_csv(transactions, filters=None, now=None, title="Financial Report",
                           sample_limit=CSV_SAMPLE_LIMIT):
    """Personal report built from the loaded transaction snapshot.

    Sections, in order: header, summary, category breakdown (ranked),
    monthly breakdown, sample of raw rows.
    """
    now = now or datetime.now()
    transactions = transactions or []
    out = _Sections()

    out.row(title)
    out.row(f"Generated on: {now.strftime('%Y-%m-%d %H:%M:%S')}")
    out.row(f"Filters: {_describe_filters(filters)}")
    out.blank()

    totals = totals_by_type(transactions)
    out.row("Summary")
    out.row("Metric", "Value")
    out.row("Total Income", f"{totals['income']:.2f}")
    out.row("Total Expense", f"{totals['expense']:.2f}")
    out.row("Net Balance", f"{totals['balance']:.2f}")
    out.row("Number of Transactions", totals["count"])
    out.row("Average Transaction", f"{average_transaction(transactions):.2f}")
    out.blank()

    breakdown = percentages(rank(group_by_category(transactions), key="value"), key="value")
    out.row("Category Breakdown (Expenses)")
    out.row("Category", "Amount", "Percentage")
    for item in breakdown:
        out.row(item["name"], f"{item['value']:.2f}", f"{item['percentage']:.1f}%")
    out.blank()

    out.row("Monthly Breakdown")
    out.row("Month", "Income", "Expense", "Net")
    for item in group_by_month(transactions):
        out.row(item["month"], f"{item['income']:.2f}", f"{item['expense']:.2f}", f"{item['net']:.2f}")
    out.blank()

    out.row(f"Transactions (first {sample_limit})")
    out.row("Date", "Category", "Type", "Amount", "Note")
    for tx in transactions[:sample_limit]:
        out.row(
            _tx_date(tx),
            tx.get("category_name") or UNCATEGORIZED,
            tx.get("type", ""),
            f"{float(tx.get('amount') or 0):.2f}",
            tx.get("note") or tx.get("description") or "",
        )
    return out.text()


def build_admin_report_csv(system_stats, transactions, filters=None, now=None,
                           top_limit=10, sample_limit=CSV_SAMPLE_LIMIT):
    """System-wide report used when the server cannot generate one."""
    now = now or datetime.now()
    stats = system_stats or {}
    transactions = transactions or []
    out = _Sections()

    out.row("Admin System Report")
    out.row(f"Generated on: {now.strftime('%Y-%m-%d')} at {now.strftime('%H:%M:%S')}")
    out.row(f"Filters: {_describe_filters(filters)}")
    out.blank()

    income = float(stats.get("total_income") or 0)
    expense = float(stats.get("total_expense") or 0)
    count = int(stats.get("transaction_count") or 0)
    out.row("SYSTEM OVERVIEW")
    out.row("Metric", "Value")
    out.row("Total Users", stats.get("total_users", stats.get("user_count", 0)) or 0)
    out.row("Active Users", stats.get("active_users") or 0)
    out.row("Total Income", _money(income))
    out.row("Total Expenses", _money(expense))
    out.row("Net Profit", _money(income - expense))
    out.row("Total Transactions", count)
    out.row("Average Transaction", _money((income + expense) / max(count, 1)))
    out.blank()

    spenders = rank(stats.get("high_spenders") or [], key="total_expense", limit=top_limit)
    out.row("TOP SPENDERS")
    out.row("Rank", "Username", "Email", "Total Spending")
    for position, spender in enumerate(spenders, start=1):
        info = spender.get("user_info") or {}
        out.row(position, info.get("username") or "N/A", info.get("email") or "N/A",
                _money(float(spender.get("total_expense") or 0)))
    out.blank()

    categories = percentages(rank(group_by_category(transactions), key="value", limit=top_limit), key="value")
    out.row("EXPENSE CATEGORIES")
    out.row("Category", "Amount", "Percentage")
    for item in categories:
        out.row(item["name"], _money(item["value"]), f"{item['percentage']:.2f}%")
    out.blank()

    out.row("MONTHLY TRENDS")
    out.row("Month", "Income", "Expense", "Net")
    for item in group_by_month(transactions):
        out.row(item["month"], _money(item["income"]), _money(item["expense"]),
                _money(item["net"]))
    out.blank()

    out.row(f"RECENT TRANSACTIONS (Last {sample_limit})")
    out.row("Date", "User ID", "Category", "Type", "Amount", "Description")
    for tx in transactions[:sample_limit]:
        out.row(
            _tx_date(tx),
            tx.get("user_id", ""),
            tx.get("category_name") or "N/A",
            tx.get("type", ""),
            _money(float(tx.get("amount") or 0)),
            tx.get("description") or tx.get("note") or "",
        )
    return out.text()
