from __future__ import annotations

import pytest

from hr_portal.main import create_app


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.setenv("AUTO_INIT_DB", "0")
    app = create_app()
    return app.test_client()


def _login_as(client, role: str, user_id: str = "u-1"):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["name"] = "Test User"
        sess["role"] = role


def test_routes_require_login(client):
    resp = client.get("/api/notifications")

    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_role_errors_map_to_403(client):
    _login_as(client, "employee")

    assert client.get("/api/payroll/2025/3").status_code == 403
    assert client.patch("/api/invoices/inv-1", json={"due_date": "2025-04-01"}).status_code == 403


def test_validation_errors_map_to_400(client):
    _login_as(client, "hr")

    resp = client.get("/api/payroll/2025/13")

    assert resp.status_code == 400
    assert "month" in resp.get_json()["message"]
    assert client.post("/api/leaves", json={"end_date": "2025-03-02"}).status_code == 400


@pytest.mark.parametrize(
    "body",
    [{"client_name": 123}, {"reference_invoice_numbers": 7}, {"pending_amount": "inf"}, {"tasks": "Design"}],
)
def test_malformed_invoice_json_is_a_400(client, body):
    _login_as(client, "finance")

    resp = client.patch("/api/invoices/inv-1", json=body)

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_login_requires_email(client):
    resp = client.post("/api/login", json={"email": "", "password": "x"})

    assert resp.status_code == 400


def test_logout_clears_session(client):
    _login_as(client, "admin")

    assert client.post("/api/logout").status_code == 200
    assert client.get("/api/notifications").status_code == 401
