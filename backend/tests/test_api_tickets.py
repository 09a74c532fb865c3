"""API tests for ticket endpoints"""
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest

from app.utils.time import utc_now
from tests.conftest import auth_headers


# =============================================================================
# Authorization gate
# =============================================================================

@pytest.mark.parametrize("method, path", [
    ("get", "/api/tickets"),
    ("get", "/api/tickets/TKT-1"),
    ("put", "/api/tickets/TKT-1"),
    ("delete", "/api/tickets/TKT-1"),
    ("post", "/api/tickets/TKT-1/responses"),
    ("get", "/api/dashboard"),
])
def test_protected_routes_need_a_token(client, method, path):
    response = getattr(client, method)(path)

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
    assert response.json()["error"]["message"] == "Not authorized, no token"


def test_malformed_token_is_rejected(client):
    response = client.get("/api/tickets", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["error"]["message"] == "Not authorized, token failed"


def test_token_of_deleted_user_looks_like_bad_token(client, db, alice):
    db["users"].delete_one({"user_id": alice["id"]})

    deleted = client.get("/api/tickets", headers=auth_headers(alice)).json()["error"]
    garbage = client.get("/api/tickets", headers={"Authorization": "Bearer x.y.z"}).json()["error"]

    assert (deleted["code"], deleted["message"]) == (garbage["code"], garbage["message"])


# =============================================================================
# Create / read
# =============================================================================

def test_create_ticket_as_multipart(client, alice, create_ticket):
    ticket = create_ticket(alice, priority="High")

    assert ticket["ticket_id"].startswith("TKT-")
    assert ticket["status"] == "Open"
    assert ticket["priority"] == "High"
    assert ticket["owner"] == {"user_id": alice["id"], "name": alice["name"], "email": alice["email"]}
    assert ticket["sla_breached"] is False
    assert ticket["sla_warning"] is False


def test_create_ticket_with_images_serves_them(client, alice, create_ticket):
    files = [
        ("images", ("screen.png", b"\x89PNG one", "image/png")),
        ("images", ("photo.jpg", b"\xff\xd8 two", "image/jpeg")),
    ]
    ticket = create_ticket(alice, files=files)

    assert [a["filename"] for a in ticket["attachments"]] == ["screen.png", "photo.jpg"]
    served = client.get("/" + ticket["attachments"][0]["path"])
    assert served.status_code == 200
    assert served.content == b"\x89PNG one"


def test_create_ticket_rejects_six_images(client, alice):
    files = [("images", (f"{i}.png", b"png", "image/png")) for i in range(6)]
    response = client.post(
        "/api/tickets",
        data={"title": "t", "description": "d", "category": "Other"},
        files=files,
        headers=auth_headers(alice)
    )
    assert response.status_code == 400


def test_create_ticket_rejects_non_images(client, alice):
    response = client.post(
        "/api/tickets",
        data={"title": "t", "description": "d", "category": "Other"},
        files=[("images", ("run.exe", b"MZ", "application/octet-stream"))],
        headers=auth_headers(alice)
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_MIME_TYPE"


@pytest.mark.parametrize("data", [
    {"description": "d", "category": "Other"},
    {"title": "t", "description": "d", "category": "Coffee"},
    {"title": "t", "description": "d", "category": "Other", "priority": "Critical"},
])
def test_create_ticket_validation(client, alice, db, data):
    response = client.post("/api/tickets", data=data, headers=auth_headers(alice))
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
    assert db["tickets"].count_documents({}) == 0


def test_list_visibility_three_users_two_tickets_each(
    client, alice, bob, carol, admin, create_ticket, ticking_clock
):
    for account in (alice, bob, carol):
        for n in range(2):
            create_ticket(account, title=f"{account['name']} #{n}")

    everything = client.get("/api/tickets", headers=auth_headers(admin)).json()
    assert len(everything) == 6

    for account in (alice, bob, carol):
        mine = client.get("/api/tickets", headers=auth_headers(account)).json()
        assert [t["title"] for t in mine] == [f"{account['name']} #1", f"{account['name']} #0"]
        assert {t["owner"]["user_id"] for t in mine} == {account["id"]}


def test_list_is_idempotent(client, alice, create_ticket):
    create_ticket(alice)
    create_ticket(alice, category="Network")

    first = client.get("/api/tickets", headers=auth_headers(alice)).json()
    second = client.get("/api/tickets", headers=auth_headers(alice)).json()
    assert first == second


def test_get_ticket(client, alice, create_ticket):
    created = create_ticket(alice)
    response = client.get(f"/api/tickets/{created['ticket_id']}", headers=auth_headers(alice))
    assert response.status_code == 200
    assert response.json()["ticket_id"] == created["ticket_id"]


def test_get_unknown_ticket_is_404(client, alice):
    response = client.get("/api/tickets/TKT-nope", headers=auth_headers(alice))
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "TICKET_NOT_FOUND"


# =============================================================================
# Non-owner access
# =============================================================================

@pytest.mark.parametrize("method, suffix, body", [
    ("get", "", None),
    ("put", "", {"title": "hijacked"}),
    ("delete", "", None),
    ("post", "/responses", {"message": "hi"}),
])
def test_non_owner_is_forbidden(client, alice, bob, create_ticket, method, suffix, body):
    ticket = create_ticket(alice)
    kwargs = {"headers": auth_headers(bob)}
    if body is not None:
        kwargs["json"] = body

    response = getattr(client, method)(f"/api/tickets/{ticket['ticket_id']}{suffix}", **kwargs)

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "NOT_AUTHORIZED"
    unchanged = client.get(f"/api/tickets/{ticket['ticket_id']}", headers=auth_headers(alice)).json()
    assert unchanged["title"] == ticket["title"]
    assert unchanged["responses"] == []


# =============================================================================
# Update
# =============================================================================

def test_owner_updates_title(client, alice, create_ticket):
    ticket = create_ticket(alice)
    response = client.put(
        f"/api/tickets/{ticket['ticket_id']}",
        json={"title": "Still broken"},
        headers=auth_headers(alice)
    )
    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Still broken"
    assert body["description"] == ticket["description"]
    assert body["last_updated_by"]["user_id"] == alice["id"]


def test_owner_cannot_resolve_own_ticket(client, alice, create_ticket):
    ticket = create_ticket(alice)
    response = client.put(
        f"/api/tickets/{ticket['ticket_id']}",
        json={"status": "Resolved"},
        headers=auth_headers(alice)
    )
    assert response.status_code == 401
    assert response.json()["error"]["details"] == {"fields": ["status"]}


def test_update_with_unknown_status_is_400(client, admin, alice, create_ticket):
    ticket = create_ticket(alice)
    response = client.put(
        f"/api/tickets/{ticket['ticket_id']}",
        json={"status": "Pending"},
        headers=auth_headers(admin)
    )
    assert response.status_code == 400


def _set_deadline(client, admin, ticket, deadline, **extra):
    body = {"resolution_date": deadline.isoformat(), **extra}
    response = client.put(f"/api/tickets/{ticket['ticket_id']}", json=body, headers=auth_headers(admin))
    assert response.status_code == 200, response.text
    return response.json()


def test_overdue_open_ticket_is_breached(client, admin, alice, create_ticket):
    ticket = _set_deadline(client, admin, create_ticket(alice), utc_now() - timedelta(hours=1))
    assert (ticket["sla_breached"], ticket["sla_warning"]) == (True, False)


def test_ticket_due_in_twelve_hours_is_warning(client, admin, alice, create_ticket):
    ticket = _set_deadline(client, admin, create_ticket(alice), utc_now() + timedelta(hours=12))
    assert (ticket["sla_breached"], ticket["sla_warning"]) == (False, True)


def test_resolved_ticket_past_deadline_is_not_breached(client, admin, alice, create_ticket):
    ticket = _set_deadline(
        client, admin, create_ticket(alice), utc_now() - timedelta(days=1), status="Resolved"
    )
    assert ticket["status"] == "Resolved"
    assert (ticket["sla_breached"], ticket["sla_warning"]) == (False, False)

    seen_by_owner = client.get(f"/api/tickets/{ticket['ticket_id']}", headers=auth_headers(alice)).json()
    assert seen_by_owner["sla_breached"] is False


def test_deadline_accepts_plain_date_and_null_clears(client, admin, alice, create_ticket):
    ticket = create_ticket(alice)
    path = f"/api/tickets/{ticket['ticket_id']}"

    dated = client.put(path, json={"resolution_date": "2030-01-15"}, headers=auth_headers(admin)).json()
    assert dated["resolution_date"].startswith("2030-01-15T00:00:00")

    cleared = client.put(path, json={"resolution_date": None}, headers=auth_headers(admin)).json()
    assert cleared["resolution_date"] is None


# =============================================================================
# Delete
# =============================================================================

def test_delete_ticket_and_its_images(client, alice, create_ticket, uploads_dir):
    import os

    ticket = create_ticket(alice, files=[("images", ("a.png", b"png", "image/png"))])
    stored = os.path.join(uploads_dir, os.path.basename(ticket["attachments"][0]["path"]))
    assert os.path.exists(stored)

    response = client.delete(f"/api/tickets/{ticket['ticket_id']}", headers=auth_headers(alice))

    assert response.status_code == 200
    assert response.json() == {"id": ticket["ticket_id"]}
    assert not os.path.exists(stored)
    gone = client.get(f"/api/tickets/{ticket['ticket_id']}", headers=auth_headers(alice))
    assert gone.status_code == 404


def test_admin_deletes_any_ticket(client, admin, alice, create_ticket):
    ticket = create_ticket(alice)
    response = client.delete(f"/api/tickets/{ticket['ticket_id']}", headers=auth_headers(admin))
    assert response.status_code == 200


# =============================================================================
# Responses
# =============================================================================

def test_responses_thread(client, alice, admin, create_ticket):
    ticket = create_ticket(alice)
    path = f"/api/tickets/{ticket['ticket_id']}/responses"

    authors = [alice, admin, alice, admin]
    for i, author in enumerate(authors):
        response = client.post(path, json={"message": f"reply {i}"}, headers=auth_headers(author))
        assert response.status_code == 200

    thread = response.json()["responses"]
    assert [r["message"] for r in thread] == [f"reply {i}" for i in range(4)]
    assert [r["user"]["user_id"] for r in thread] == [a["id"] for a in authors]
    assert len({r["response_id"] for r in thread}) == 4
    assert response.json()["last_updated_by"]["user_id"] == admin["id"]


def test_concurrent_responses_are_all_kept(client, alice, admin, create_ticket):
    ticket = create_ticket(alice)
    path = f"/api/tickets/{ticket['ticket_id']}/responses"

    def reply(i):
        author = admin if i % 2 else alice
        return client.post(path, json={"message": f"reply {i}"}, headers=auth_headers(author))

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(reply, range(20)))

    assert all(r.status_code == 200 for r in results)
    thread = client.get(f"/api/tickets/{ticket['ticket_id']}", headers=auth_headers(alice)).json()["responses"]
    assert len(thread) == 20
    assert len({r["response_id"] for r in thread}) == 20
    assert sorted(r["message"] for r in thread) == sorted(f"reply {i}" for i in range(20))


def test_empty_response_is_400(client, alice, create_ticket):
    ticket = create_ticket(alice)
    response = client.post(
        f"/api/tickets/{ticket['ticket_id']}/responses",
        json={"message": ""},
        headers=auth_headers(alice)
    )
    assert response.status_code == 400


def test_response_on_unknown_ticket_is_404(client, alice):
    response = client.post(
        "/api/tickets/TKT-nope/responses",
        json={"message": "hello"},
        headers=auth_headers(alice)
    )
    assert response.status_code == 404
