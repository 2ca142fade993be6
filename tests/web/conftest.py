"""Web test fixtures: TestClient with shared in-memory SQLite and a fake storage backend."""

from __future__ import annotations

import json
from base64 import b64encode

import pytest
from itsdangerous import TimestampSigner
from sqlalchemy import create_engine, event, text
from sqlalchemy.pool import StaticPool

from packdash.models.admin import AppRole
from packdash.repositories.sqlalchemy import SQLAlchemyRoleRepository
from tests.conftest import SCHEMA_DDL, FakeStorage

ADMIN_ID = "0f6c2b1e-aaaa-4b4b-8c8c-000000000001"
CUSTOMER_ID = "0f6c2b1e-bbbb-4b4b-8c8c-000000000002"

ALLOWED_BUCKETS = ["print-cards", "ncr-attachments", "tech-specs", "b1"]
EXTERNAL_HOST = "files.example.com"


def _make_test_engine():
    """Create a fresh in-memory SQLite engine with shared connection pool."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()

    with engine.connect() as conn:
        for statement in SCHEMA_DDL.strip().split(";"):
            stmt = statement.strip()
            if stmt:
                conn.execute(text(stmt))
        conn.commit()

    return engine


def grant_role_in_db(engine, user_id: str, role: AppRole = AppRole.ADMIN) -> None:
    with engine.connect() as conn:
        SQLAlchemyRoleRepository(conn).add(user_id, role)


def session_cookie(data: dict) -> str:
    """Encode a session the way Starlette's SessionMiddleware does."""
    from web.app import SECRET_KEY

    signer = TimestampSigner(str(SECRET_KEY))
    payload = b64encode(json.dumps(data).encode("utf-8"))
    return signer.sign(payload).decode("utf-8")


def sign_in(client, user_id: str, **extra) -> None:
    client.cookies.set("session", session_cookie({"user_id": user_id, **extra}))


@pytest.fixture(autouse=True)
def web_test_db(monkeypatch):
    """Set up in-memory DB and patch the web app to use it."""
    engine = _make_test_engine()

    import web.deps as deps_module

    monkeypatch.setattr(deps_module, "get_engine", lambda: engine)

    import web.app as app_module

    monkeypatch.setattr(app_module, "initialize_db", lambda: None)

    yield engine

    engine.dispose()


@pytest.fixture()
def test_engine(web_test_db):
    return web_test_db


@pytest.fixture()
def web_storage(monkeypatch) -> FakeStorage:
    storage = FakeStorage()

    import web.deps as deps_module

    monkeypatch.setattr(deps_module, "get_shared_storage", lambda: storage)
    return storage


@pytest.fixture(autouse=True)
def file_allow_lists(monkeypatch):
    from packdash.settings import settings

    monkeypatch.setattr(settings, "files_allowed_buckets", ALLOWED_BUCKETS)
    monkeypatch.setattr(settings, "files_allowed_hosts", [EXTERNAL_HOST])
    monkeypatch.setattr(settings, "supabase_url", "https://abcd.supabase.co")


@pytest.fixture()
def client():
    from starlette.testclient import TestClient

    from web.app import app

    return TestClient(app)


@pytest.fixture()
def customer_client(client):
    sign_in(client, CUSTOMER_ID)
    return client


@pytest.fixture()
def admin_client(client, test_engine):
    grant_role_in_db(test_engine, ADMIN_ID)
    sign_in(client, ADMIN_ID)
    return client
