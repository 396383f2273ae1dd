# tests/test_reports.py

import random

import pytest

from budgetwise_client.utils.reports import (
    average_transaction,
    build_report,
    category_label,
    filter_transactions,
    group_by_category,
    group_by_day,
    group_by_month,
    partition_by_type,
    percentages,
    rank,
    to_frame,
    totals_by_type,
)

from conftest import tx

CATEGORIES = [{"id": 1, "name": "Food", "type": "expense"}, {"id": 2, "name": "Salary", "type": "income"}]


def test_empty_inputs_yield_empty_results():
    assert totals_by_type([]) == {"income": 0.0, "expense": 0.0, "balance": 0.0, "count": 0}
    assert average_transaction([]) == 0
    assert group_by_category([]) == []
    assert group_by_month([]) == []
    assert group_by_day([]) == []
    assert rank([]) == []
    assert percentages([]) == []
    assert to_frame([]).empty


def test_totals_balance_identity():
    items = [tx(1, 0.1, "income"), tx(2, 0.2, "income"), tx(3, 0.3), tx(4, 1000.55, "income"), tx(5, 19.99)]
    totals = totals_by_type(items)
    assert totals["income"] - totals["expense"] == totals["balance"]
    assert totals["count"] == 5
    assert totals["income"] == 1000.85


def test_totals_do_not_depend_on_order():
    items = [tx(i, amount, "income" if i % 3 == 0 else "expense", date=f"2024-0{i % 9 + 1}-10")
             for i, amount in enumerate([0.1, 0.2, 0.3, 1e6, 19.99, 0.7, 3.33, 1e-3, 42.0, 0.05, 7.77, 1e5])]
    expected = totals_by_type(items)

    shuffled = list(items)
    random.Random(7).shuffle(shuffled)
    for ordering in (list(reversed(items)), shuffled):
        assert totals_by_type(ordering) == expected
        assert group_by_month(ordering) == group_by_month(items)


def test_monthly_grouping_is_ascending():
    items = [
        tx(1, 100, "income", date="2024-03-02"),
        tx(2, 40, date="2024-01-10"),
        tx(3, 10, date="2024-03-20"),
        tx(4, 60, "income", date="2024-01-31T18:00:00"),
    ]
    assert group_by_month(items) == [
        {"month": "2024-01", "income": 60.0, "expense": 40.0, "net": 20.0},
        {"month": "2024-03", "income": 100.0, "expense": 10.0, "net": 90.0},
    ]


def test_daily_grouping_skips_undated():
    items = [tx(1, 5, date="2024-01-02"), tx(2, 7, date=None), tx(3, 3, date="2024-01-01")]
    assert [d["date"] for d in group_by_day(items)] == ["2024-01-01", "2024-01-02"]


def test_rank_is_stable_and_limited():
    items = [{"name": n, "value": v} for n, v in zip("abcde", [50, 200, 200, 10, 5])]
    assert [i["name"] for i in rank(items, limit=3)] == ["b", "c", "a"]
    assert [i["name"] for i in rank(items)] == ["b", "c", "a", "d", "e"]


def test_dangling_category_is_uncategorized():
    items = [tx(1, 10, category_id=99), tx(2, 5, category_id=1)]
    assert category_label(items[0], CATEGORIES) == "Uncategorized"
    assert group_by_category(items, CATEGORIES) == [
        {"name": "Uncategorized", "value": 10.0},
        {"name": "Food", "value": 5.0},
    ]


def test_category_label_sources():
    assert category_label({"category_name": "Rent"}) == "Rent"
    assert category_label({"category": {"name": "Fuel"}}) == "Fuel"
    assert category_label({"category_id": 2}, CATEGORIES) == "Salary"
    assert category_label({}) == "Uncategorized"


def test_group_by_category_income():
    items = [tx(1, 10, "income", category_name="Salary"), tx(2, 5, category_name="Food")]
    assert group_by_category(items, tx_type="income") == [{"name": "Salary", "value": 10.0}]


def test_percentages_guard_zero_total():
    assert percentages([{"value": 0}, {"value": 0}]) == [{"value": 0, "percentage": 0.0},
                                                         {"value": 0, "percentage": 0.0}]
    shares = percentages([{"value": 1}, {"value": 2}])
    assert [s["percentage"] for s in shares] == [33.33, 66.67]


def test_invalid_amounts_are_dropped():
    items = [tx(1, "abc"), tx(2, "12.5")]
    assert totals_by_type(items)["expense"] == 12.5
    assert totals_by_type(items)["count"] == 1


def test_partition_by_type():
    partitions = partition_by_type(CATEGORIES)
    assert [c["name"] for c in partitions["income"]] == ["Salary"]
    assert [c["name"] for c in partitions["expense"]] == ["Food"]


@pytest.mark.parametrize("kwargs,expected", [
    ({"tx_type": "income"}, [2]),
    ({"search": "TAXI"}, [3]),
    ({"category_id": "1"}, [1]),
    ({"date_from": "2024-02-01", "date_to": "2024-02-28"}, [2]),
    ({"min_amount": 20, "max_amount": 100}, [2]),
    ({}, [1, 2, 3]),
])
def test_filter_transactions(kwargs, expected):
    items = [
        tx(1, 10, category_id=1, date="2024-01-05", note="groceries"),
        tx(2, 50, "income", category_id=2, date="2024-02-10", note="bonus"),
        tx(3, 150, category_id=None, date="2024-03-01", note="Taxi home"),
    ]
    assert [t["id"] for t in filter_transactions(items, **kwargs)] == expected


def test_build_report_bundle():
    items = [tx(1, 30, category_name="Food", date="2024-01-01"),
             tx(2, 70, category_name="Rent", date="2024-01-02"),
             tx(3, 200, "income", date="2024-01-03")]
    report = build_report(items)
    assert report["summary"]["balance"] == 100.0
    assert report["average"] == 100.0
    assert [c["name"] for c in report["categories"]] == ["Rent", "Food"]
    assert report["categories"][0]["percentage"] == 70.0
    assert len(report["daily"]) == 3
