# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import random
from pathlib import Path

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pymongo.errors import PyMongoError

from portal.auth.session import SessionData, SessionStore
from portal.errors import InternalError
from portal.infra.user_repo import ROLE_ADMIN, ROLE_USER, UserRecord, UserRepository
from portal.permissions import (
    cookie_settings,
    current_session_optional,
    get_sessions,
    get_users,
    require_admin,
    require_session,
    session_token,
)
from portal.schemas import LoginForm, SignupForm, parse_form
from portal.services.account_service import authenticate, change_role, register

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))

MEMBER_IMAGES = [
    "/static/images/image1.svg",
    "/static/images/image2.svg",
    "/static/images/image3.svg",
]

router = APIRouter()


def render(request: Request, template_name: str, ctx: dict | None = None, *, status_code: int = 200):
    """TemplateResponse wrapper injecting the current request's session."""
    base_ctx = {"current_user": getattr(request.state, "session", None)}
    merged = {**base_ctx, **(ctx or {})}
    return templates.TemplateResponse(request, template_name, merged, status_code=status_code)


def _greeting(session: SessionData | None) -> str:
    return f"Hello, {session.name}!" if session else ""


def _start_session(request: Request, sessions: SessionStore, user: UserRecord) -> RedirectResponse:
    # Snapshot of the stored record, not of what was typed in the form.
    token = sessions.create(user.name, user.email)
    settings = request.app.state.settings
    resp = RedirectResponse(url="/members", status_code=303)
    resp.set_cookie(settings.cookie_name, token, **cookie_settings(settings))
    return resp


# ------------------ Public pages ------------------


@router.get("/", response_class=HTMLResponse)
def home(request: Request, session=Depends(current_session_optional)):
    return render(request, "home.html", {"title": "Home", "greeting": _greeting(session)})


@router.get("/about", response_class=HTMLResponse)
def about(request: Request):
    return render(request, "about.html", {"title": "About"})


# ------------------ Signup / login / logout ------------------


@router.get("/signup", response_class=HTMLResponse)
def signup_get(request: Request, session=Depends(current_session_optional)):
    if session:
        return RedirectResponse(url="/members", status_code=303)
    return render(request, "signup.html", {"title": "Signup"})


@router.post("/signup")
def signup_post(
    request: Request,
    name: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    users: UserRepository = Depends(get_users),
    sessions: SessionStore = Depends(get_sessions),
):
    form = parse_form(
        SignupForm,
        {"name": name, "email": email, "password": password},
        title="Signup Error",
        back_url="/signup",
    )
    user = register(users, form)
    return _start_session(request, sessions, user)


@router.get("/login", response_class=HTMLResponse)
def login_get(request: Request, session=Depends(current_session_optional)):
    if session:
        return RedirectResponse(url="/members", status_code=303)
    return render(request, "login.html", {"title": "Login"})


@router.post("/login")
def login_post(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    users: UserRepository = Depends(get_users),
    sessions: SessionStore = Depends(get_sessions),
):
    form = parse_form(
        LoginForm,
        {"email": email, "password": password},
        title="Login Error",
        back_url="/login",
    )
    user = authenticate(users, form)
    logger.info("User %s logged in", user.email)
    return _start_session(request, sessions, user)


@router.get("/logout")
def logout(request: Request, sessions: SessionStore = Depends(get_sessions)):
    token = session_token(request)
    if token:
        try:
            if sessions.destroy(token):
                logger.info("Session destroyed")
        except PyMongoError as e:
            logger.exception("Failed to destroy session")
            raise InternalError("Could not log you out. Please try again.") from e
    resp = RedirectResponse(url="/", status_code=303)
    resp.delete_cookie(request.app.state.settings.cookie_name)
    return resp


# ------------------ Members ------------------


@router.get("/members", response_class=HTMLResponse)
def members(request: Request, session: SessionData = Depends(require_session)):
    return render(
        request,
        "members.html",
        {
            "title": "Members",
            "name": session.name,
            "greeting": _greeting(session),
            "random_image": random.choice(MEMBER_IMAGES),
        },
    )


# ------------------ Admin ------------------


@router.get("/admin", response_class=HTMLResponse)
def admin(
    request: Request,
    admin_user: UserRecord = Depends(require_admin),
    users: UserRepository = Depends(get_users),
):
    return render(
        request,
        "admin.html",
        {"title": "Admin", "users": users.list_all(), "admin_user": admin_user},
    )


@router.post("/admin/promote/{user_id}")
def promote(
    user_id: str,
    admin_user: UserRecord = Depends(require_admin),
    users: UserRepository = Depends(get_users),
):
    change_role(users, user_id, ROLE_ADMIN, actor=admin_user.email)
    return RedirectResponse(url="/admin", status_code=303)


@router.post("/admin/demote/{user_id}")
def demote(
    user_id: str,
    admin_user: UserRecord = Depends(require_admin),
    users: UserRepository = Depends(get_users),
):
    change_role(users, user_id, ROLE_USER, actor=admin_user.email)
    return RedirectResponse(url="/admin", status_code=303)
