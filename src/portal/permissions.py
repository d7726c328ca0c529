# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, Request

from portal.auth.session import SessionData, SessionStore
from portal.config import Settings
from portal.errors import AuthorizationError
from portal.infra.user_repo import UserRecord, UserRepository


def get_users(request: Request) -> UserRepository:
    return request.app.state.users


def get_sessions(request: Request) -> SessionStore:
    return request.app.state.sessions


def session_token(request: Request) -> str:
    return request.cookies.get(request.app.state.settings.cookie_name, "")


def load_session_from_request(request: Request) -> Optional[SessionData]:
    sessions = getattr(request.app.state, "sessions", None)
    if sessions is None:
        return None
    return sessions.load(session_token(request))


def current_session_optional(request: Request) -> Optional[SessionData]:
    return getattr(request.state, "session", None)


def _redirect(location: str) -> HTTPException:
    return HTTPException(status_code=303, headers={"Location": location})


def require_session(request: Request) -> SessionData:
    s = current_session_optional(request)
    if s:
        return s
    raise _redirect("/")


def require_admin(request: Request) -> UserRecord:
    """Role is read from the users collection on every call, never from the session."""
    s = current_session_optional(request)
    user = get_users(request).find_by_email(s.email) if s else None
    if not user:
        raise _redirect("/login")
    if not user.is_admin:
        raise AuthorizationError(
            "Forbidden: You do not have access to this page",
            title="Forbidden",
        )
    return user


def cookie_settings(settings: Settings) -> dict:
    return {
        "httponly": True,
        "samesite": "lax",
        "secure": settings.cookie_secure,
        "max_age": settings.session_ttl_seconds,
    }
