"""Root conftest: in-memory SQLite schema and a fake storage backend."""

from __future__ import annotations

import threading

import pytest
from sqlalchemy import Connection, create_engine, event, text
from sqlalchemy.engine import Engine

from packdash.storage.base import StorageBackend, StorageError, StorageNotFoundError

# Matches Alembic head: 3f1a9c7d2b10 (create user_roles)
SCHEMA_DDL = """
CREATE TABLE user_roles (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id VARCHAR(36) NOT NULL,
    role VARCHAR(20) NOT NULL,
    created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP,
    UNIQUE(user_id, role)
);
"""


class FakeStorage(StorageBackend):
    """In-memory backend. Signed URLs look like ``https://signed.test/<bucket>/<path>?expires=<n>``."""

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], bytes] = {}
        self.content_types: dict[tuple[str, str], str] = {}
        self.sign_calls: list[tuple[str, str, int]] = []
        self.failing_buckets: set[str] = set()
        self._lock = threading.Lock()

    def put(self, bucket: str, path: str, data: bytes = b"data") -> None:
        self.objects[(bucket, path)] = data

    def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str = "application/octet-stream",
        upsert: bool = False,
    ) -> None:
        if bucket in self.failing_buckets:
            raise StorageError(f"Bucket unavailable: {bucket}")
        if (bucket, path) in self.objects and not upsert:
            raise StorageError(f"Object already exists: {bucket}:{path}")
        self.objects[(bucket, path)] = data
        self.content_types[(bucket, path)] = content_type

    def create_signed_url(self, bucket: str, path: str, expires_in: int) -> str:
        with self._lock:
            self.sign_calls.append((bucket, path, expires_in))
        if bucket in self.failing_buckets:
            raise StorageError(f"Bucket unavailable: {bucket}")
        if (bucket, path) not in self.objects:
            raise StorageNotFoundError(f"Object not found: {bucket}:{path}")
        return f"https://signed.test/{bucket}/{path}?expires={expires_in}"


@pytest.fixture()
def fake_storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture()
def db_engine() -> Engine:
    engine = create_engine("sqlite:///:memory:")

    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()

    return engine


@pytest.fixture()
def db_connection(db_engine: Engine) -> Connection:
    conn = db_engine.connect()
    for statement in SCHEMA_DDL.strip().split(";"):
        stmt = statement.strip()
        if stmt:
            conn.execute(text(stmt))
    conn.commit()
    yield conn
    conn.close()
