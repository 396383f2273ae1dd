# tests/test_services.py

from datetime import datetime

import pytest

from budgetwise_client.services import (
    AdminService,
    AuthService,
    CategoryService,
    TransactionService,
    UserService,
)

from conftest import FakeResponse

NOW = datetime(2024, 3, 5, 10, 11, 12)


def test_auth_service_endpoints(api, session):
    auth = AuthService(api)
    session.add("POST", "/auth/login/", json_data={"token": "t"})
    session.add("GET", "/auth/verify-email", json_data={"message": "ok"})
    session.add("POST", "/auth/reset-password/", json_data={})

    assert auth.login({"username": "a", "password": "b"}) == {"token": "t"}
    assert session.last.json == {"username": "a", "password": "b"}

    auth.verify_email("tok")
    assert session.last.params == {"token": "tok"}

    auth.reset_password("tok", "secret123")
    assert session.last.json == {"token": "tok", "password": "secret123"}


def test_category_list_filters_by_type(api, session):
    categories = CategoryService(api)
    session.add("GET", "/categories/", json_data=[])
    categories.list("income")
    assert session.last.params == {"type": "income"}
    categories.list()
    assert session.last.params == {}


def test_category_update_uses_put(api, session):
    session.add("PUT", "/categories/7/", json_data={"category": {"id": 7}})
    CategoryService(api).update(7, {"name": "Food", "type": "expense"})
    assert session.last.method == "PUT"
    assert session.last.json == {"name": "Food", "type": "expense"}


def test_transaction_recent_requests_first_page(api, session):
    session.add("GET", "/transactions/", json_data={"items": []})
    TransactionService(api).recent(5)
    assert session.last.params == {"page": 1, "per_page": 5}


def test_transaction_bulk_delete_and_duplicate(api, session):
    service = TransactionService(api)
    session.add("POST", "/transactions/bulk-delete/", json_data={"deleted": 2})
    session.add("POST", "/transactions/duplicate/4/", json_data={"transaction": {"id": 9}})

    service.bulk_delete((1, 2))
    assert session.last.json == {"transaction_ids": [1, 2]}
    assert service.duplicate(4) == {"transaction": {"id": 9}}


def test_transaction_export_returns_typed_result(api, session):
    session.add("GET", "/transactions/export/",
                response=FakeResponse(200, None, content=b"xlsx-bytes",
                                      headers={"Content-Type": "application/octet-stream"}))
    result = TransactionService(api).export("excel", {"type": "expense"}, now=NOW)

    assert result.content == b"xlsx-bytes"
    assert result.mime_type == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    assert result.filename == "transactions_20240305T101112.xlsx"
    assert result.fallback is False
    assert session.last.params == {"format": "excel", "type": "expense"}
    assert session.last.timeout == 120


def test_export_rejects_unknown_format(api, session):
    with pytest.raises(ValueError):
        TransactionService(api).export("docx")
    assert session.calls == []


def test_user_delete_account_sends_password(api, session):
    session.add("DELETE", "/user/delete-account/", json_data={"message": "deleted"})
    UserService(api).delete_account("pw12345678")
    assert session.last.json == {"password": "pw12345678"}


def test_user_dashboard_stats_range(api, session):
    session.add("GET", "/user/dashboard/", json_data={})
    UserService(api).dashboard_stats("year")
    assert session.last.params == {"range": "year"}


def test_admin_list_users_drops_empty_search(api, session):
    session.add("GET", "/admin/users/", json_data={"users": [], "total": 0})
    AdminService(api).list_users(2, 20, "")
    assert session.last.params == {"page": 2, "per_page": 20}


def test_admin_generate_report(api, session):
    session.add("POST", "/admin/generate-report",
                response=FakeResponse(200, None, content=b"%PDF", headers={"Content-Type": "application/pdf"}))
    result = AdminService(api).generate_report("pdf", {"start_date": "2024-01-01"}, now=NOW)

    assert session.last.json == {"format": "pdf", "start_date": "2024-01-01"}
    assert result.filename == "admin_report_pdf_2024-03-05.pdf"
    assert result.mime_type == "application/pdf"
