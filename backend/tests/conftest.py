"""
Pytest Configuration and Fixtures

MongoDB is replaced by an in-memory mongomock client and files go to a
throwaway directory. Environment overrides must be in place before the
app package is imported because settings are read at import time.
"""

import os
import tempfile

_TEST_ROOT = tempfile.mkdtemp(prefix="helpdesk-tests-")
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["MONGO_DB"] = "helpdesk_test"
os.environ["LOGS_PATH"] = os.path.join(_TEST_ROOT, "logs")
os.environ["UPLOADS_PATH"] = os.path.join(_TEST_ROOT, "uploads")

import mongomock
import pytest
from fastapi.testclient import TestClient

from app.config.settings import settings
from app.domain.models import ActorContext
from app.repositories import mongo_client
from app.services.auth_service import AuthService
from app.main import app


def auth_headers(account: dict) -> dict:
    """Authorization header for an account returned by register/login"""
    return {"Authorization": f"Bearer {account['token']}"}


def actor_for(account: dict) -> ActorContext:
    """ActorContext for an account returned by register/login"""
    return ActorContext(
        user_id=account["id"],
        name=account["name"],
        email=account["email"],
        role=account["role"]
    )


@pytest.fixture()
def db(monkeypatch):
    """Fresh in-memory database per test"""
    client = mongomock.MongoClient(tz_aware=True)
    database = client[settings.mongo_db]
    monkeypatch.setattr(mongo_client, "_client", client)
    monkeypatch.setattr(mongo_client, "_database", database)
    mongo_client.create_indexes()
    yield database


@pytest.fixture()
def client(db):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def uploads_dir():
    return settings.uploads_path


# =============================================================================
# Accounts
# =============================================================================

@pytest.fixture()
def make_account(db):
    """Create an account through the auth service and return its AuthResult as a dict"""
    service = AuthService()

    def _make(name: str, email: str, password: str = "secret123", role: str = "user") -> dict:
        result = service.register(name=name, email=email, password=password, role=role)
        return result.model_dump(mode="json")

    return _make


@pytest.fixture()
def alice(make_account):
    return make_account("Alice Jones", "alice@company.com")


@pytest.fixture()
def bob(make_account):
    return make_account("Bob Smith", "bob@company.com")


@pytest.fixture()
def carol(make_account):
    return make_account("Carol White", "carol@company.com")


@pytest.fixture()
def admin(make_account):
    return make_account("System Admin", "admin@company.com", role="admin")


# =============================================================================
# Tickets
# =============================================================================

@pytest.fixture()
def create_ticket(client):
    """Open a ticket over HTTP as the given account"""

    def _create(
        account: dict,
        title: str = "Laptop will not boot",
        description: str = "Black screen after the latest update",
        category: str = "Hardware",
        priority: str = None,
        files=None
    ) -> dict:
        data = {"title": title, "description": description, "category": category}
        if priority:
            data["priority"] = priority
        response = client.post(
            "/api/tickets",
            data=data,
            files=files,
            headers=auth_headers(account)
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture()
def ticking_clock(monkeypatch):
    """Make each ticket write one second later than the last so ordering is deterministic"""
    from datetime import timedelta
    from app.services import ticket_service
    from app.utils.time import utc_now

    start = utc_now()
    ticks = {"n": 0}

    def _now():
        ticks["n"] += 1
        return start + timedelta(seconds=ticks["n"])

    monkeypatch.setattr(ticket_service, "utc_now", _now)
    return _now
