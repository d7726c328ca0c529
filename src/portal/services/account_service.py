# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging

from portal.auth.passwords import hash_password, verify_password
from portal.errors import AuthError, ConflictError, NotFoundError
from portal.infra.user_repo import ROLE_USER, ROLES, UserRecord, UserRepository
from portal.schemas import LoginForm, SignupForm

logger = logging.getLogger(__name__)


def register(users: UserRepository, form: SignupForm) -> UserRecord:
    """Create a new account with the default role.

    The email must not belong to an existing user; nothing is written otherwise.
    """
    if users.find_by_email(form.email):
        raise ConflictError("Email already registered!", title="Signup Error", back_url="/signup")

    user = users.insert(
        name=form.name,
        email=form.email,
        password_hash=hash_password(form.password),
        role=ROLE_USER,
    )
    logger.info("Registered user %s", user.email)
    return user


def authenticate(users: UserRepository, form: LoginForm) -> UserRecord:
    user = users.find_by_email(form.email)
    if not user:
        logger.info("Login failed for %s: unknown email", form.email)
        raise AuthError("User not found!", title="Login Error", back_url="/login")
    if not verify_password(user.password_hash, form.password):
        logger.info("Login failed for %s: wrong password", form.email)
        raise AuthError("Incorrect password!", title="Login Error", back_url="/login")
    return user


def change_role(users: UserRepository, user_id: str, role: str, *, actor: str = "") -> UserRecord:
    if role not in ROLES:
        raise ValueError(f"Unknown role '{role}'")
    if not users.set_role(user_id, role):
        raise NotFoundError("User not found", back_url="/admin")
    user = users.find_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found", back_url="/admin")
    logger.info("Role of %s set to %s by %s", user.email, role, actor or "unknown")
    return user
