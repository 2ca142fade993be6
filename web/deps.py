from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from packdash.db import get_engine
from packdash.repositories.sqlalchemy import SQLAlchemyRoleRepository
from packdash.services.admin_service import AdminService
from packdash.services.file_service import FileService
from packdash.storage.base import StorageBackend
from packdash.storage.factory import get_storage

logger = logging.getLogger(__name__)

PUBLIC_EXACT_PATHS = {"/health"}

VIEW_AS_CUSTOMER_KEY = "view_as_customer"


class AuthMiddleware:
    """Pure ASGI middleware: every route except the public ones needs a signed-in user.

    The sign-in flow itself lives in the identity provider; it only has to
    put ``user_id`` in the session.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive)
        path = request.url.path
        if path in PUBLIC_EXACT_PATHS:
            await self.app(scope, receive, send)
            return
        if not request.session.get("user_id"):
            logger.info("Unauthenticated request: %s %s", request.method, path)
            response = JSONResponse({"detail": "Not authenticated"}, status_code=401)
            await response(scope, receive, send)
            return
        await self.app(scope, receive, send)


class DBConnectionMiddleware:
    """Pure ASGI middleware: at most one DB connection per request."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        request.state.db_conn = None
        try:
            await self.app(scope, receive, send)
        finally:
            conn = getattr(request.state, "db_conn", None)
            if conn is not None:
                conn.close()
                logger.debug("DB connection closed for %s %s", request.method, request.url.path)


def _get_conn(request: Request):
    """Lazy per-request connection, closed by DBConnectionMiddleware."""
    if request.state.db_conn is None:
        logger.debug("Creating DB connection for %s %s", request.method, request.url.path)
        request.state.db_conn = get_engine().connect()
    return request.state.db_conn


@lru_cache(maxsize=1)
def get_shared_storage() -> StorageBackend:
    """One backend per process; the Supabase client holds an HTTP session."""
    return get_storage()


def get_file_service(request: Request) -> FileService:
    return FileService(get_shared_storage())


def get_admin_service(request: Request) -> AdminService:
    return AdminService(SQLAlchemyRoleRepository(_get_conn(request)))


def is_viewing_as_customer(request: Request) -> bool:
    # Keyed by user id so the toggle resets when another user signs in.
    user_id = request.session.get("user_id")
    return user_id is not None and request.session.get(VIEW_AS_CUSTOMER_KEY) == user_id
