from __future__ import annotations

import logging
import traceback
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from starlette.middleware.sessions import SessionMiddleware
from starlette.responses import HTMLResponse

from packdash.db import initialize_db
from packdash.logging import configure_logging, reconfigure
from packdash.settings import settings
from web.deps import AuthMiddleware, DBConnectionMiddleware
from web.routes.admin import router as admin_router
from web.routes.files import router as files_router

configure_logging()
logger = logging.getLogger(__name__)

SECRET_KEY = settings.get_secret_key()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    initialize_db()
    # Alembic's fileConfig replaces the root handlers.
    reconfigure()
    logger.info("Application started")
    yield


app = FastAPI(docs_url=None, redoc_url=None, lifespan=lifespan)

app.add_middleware(DBConnectionMiddleware)
app.add_middleware(AuthMiddleware)
app.add_middleware(SessionMiddleware, secret_key=SECRET_KEY)

app.include_router(files_router)
app.include_router(admin_router)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception on %s %s:\n%s",
        request.method,
        request.url.path,
        traceback.format_exc(),
    )
    return HTMLResponse("Internal Server Error", status_code=500)


@app.get("/health")
async def health():
    return {"status": "ok"}
