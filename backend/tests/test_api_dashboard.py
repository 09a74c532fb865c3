"""API tests for dashboard metrics and service endpoints"""
from datetime import timedelta

from app.utils.time import utc_now
from tests.conftest import auth_headers


def test_dashboard_for_admin(client, admin, alice, create_ticket):
    overdue = create_ticket(alice, category="Network")
    create_ticket(alice, category="Software")
    create_ticket(alice, category="Software")
    client.put(
        f"/api/tickets/{overdue['ticket_id']}",
        json={"resolution_date": (utc_now() - timedelta(hours=2)).isoformat()},
        headers=auth_headers(admin)
    )

    response = client.get("/api/dashboard", headers=auth_headers(admin))

    assert response.status_code == 200
    body = response.json()
    assert body["total_tickets"] == 3
    assert body["open_tickets"] == 3
    assert body["breached_tickets"] == 1
    assert body["warning_tickets"] == 0
    assert body["tickets_by_category"] == [
        {"category": "Network", "count": 1},
        {"category": "Software", "count": 2},
    ]


def test_dashboard_denied_for_regular_user(client, alice):
    response = client.get("/api/dashboard", headers=auth_headers(alice))
    assert response.status_code == 401
    assert response.json()["error"]["message"] == "Not authorized as an admin"


def test_health_reports_database(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["mongo"]["connection"] == "ok"


def test_root_says_api_is_running(client):
    assert client.get("/").json()["message"] == "API is running"


def test_correlation_id_is_echoed(client):
    response = client.get("/", headers={"X-Correlation-Id": "COR-test-1"})
    assert response.headers["X-Correlation-Id"] == "COR-test-1"


def test_correlation_id_is_generated(client):
    assert client.get("/").headers["X-Correlation-Id"].startswith("COR-")
