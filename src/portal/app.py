# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.staticfiles import StaticFiles
from pymongo.errors import PyMongoError
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from portal.auth.session import SessionStore
from portal.config import Settings, get_settings
from portal.errors import PortalError
from portal.infra.mongo import SESSIONS, USERS, ClientFactory, close, connect, ensure_indexes
from portal.infra.user_repo import UserRepository
from portal.permissions import load_session_from_request
from portal.routes import BASE_DIR, render, router

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Something went wrong on our side. Please try again later."


def _internal_error_page(request: Request):
    return render(
        request,
        "error.html",
        {"title": "Internal Server Error", "messages": [GENERIC_ERROR], "back_url": "/"},
        status_code=500,
    )


def create_app(settings: Optional[Settings] = None, client_factory: Optional[ClientFactory] = None) -> FastAPI:
    """Build the application.

    Settings and the database client are resolved at startup, not at import time.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        s = settings or get_settings()
        s.check()
        client = connect(s, client_factory)
        db = client[s.mongodb_database]
        ensure_indexes(db)
        app.state.settings = s
        app.state.mongo = client
        app.state.users = UserRepository(db[USERS])
        app.state.sessions = SessionStore(
            db[SESSIONS],
            secret=s.session_secret,
            store_secret=s.session_store_secret,
            ttl_seconds=s.session_ttl_seconds,
        )
        try:
            yield
        finally:
            close(client)

    app = FastAPI(title="Members Portal", lifespan=lifespan)
    app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")

    @app.middleware("http")
    async def _session_middleware(request: Request, call_next):
        request.state.session = None
        if not request.url.path.startswith("/static"):
            request.state.session = await run_in_threadpool(load_session_from_request, request)
        return await call_next(request)

    @app.exception_handler(PortalError)
    async def _portal_error(request: Request, exc: PortalError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return render(
            request,
            "error.html",
            {"title": exc.title, "messages": exc.messages, "back_url": exc.back_url},
            status_code=exc.status_code,
        )

    @app.exception_handler(PyMongoError)
    async def _datastore_error(request: Request, exc: PyMongoError):
        logger.error("Datastore error on %s %s", request.method, request.url.path, exc_info=exc)
        return _internal_error_page(request)

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return render(request, "404.html", {"title": "404 Not Found"}, status_code=404)
        return await http_exception_handler(request, exc)

    @app.exception_handler(Exception)
    async def _unhandled_error(request: Request, exc: Exception):
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return _internal_error_page(request)

    app.include_router(router)
    return app


app = create_app()
