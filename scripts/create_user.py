#!/usr/bin/env python3
from __future__ import annotations

from getpass import getpass

from portal.config import get_settings
from portal.errors import PortalError
from portal.infra.mongo import USERS, close, connect
from portal.infra.user_repo import ROLE_USER, ROLES, UserRecord, UserRepository
from portal.schemas import SignupForm, parse_form
from portal.services.account_service import change_role, register


def create_user(users: UserRepository, *, name: str, email: str, password: str, role: str = ROLE_USER) -> UserRecord:
    """Create an account, or only set the role when the email is already registered."""
    if role not in ROLES:
        raise ValueError(f"Unknown role '{role}'")
    form = parse_form(
        SignupForm,
        {"name": name, "email": email, "password": password},
        title="Invalid user",
        back_url="",
    )
    # Look up the normalised address, the same form signup stores.
    existing = users.find_by_email(form.email)
    if existing:
        return change_role(users, existing.id, role, actor="create_user")
    user = register(users, form)
    if role != ROLE_USER:
        user = change_role(users, user.id, role, actor="create_user")
    return user


def main() -> None:
    settings = get_settings()
    settings.check()
    client = connect(settings)
    try:
        users = UserRepository(client[settings.mongodb_database][USERS])

        name = input("Name: ").strip()
        email = input("Email: ").strip()
        role = (input("Role [user/admin]: ").strip().lower() or ROLE_USER)
        pw1 = getpass("Password: ")
        pw2 = getpass("Repeat password: ")
        if pw1 != pw2:
            raise SystemExit("Passwords do not match")

        try:
            user = create_user(users, name=name, email=email, password=pw1, role=role)
        except (PortalError, ValueError) as e:
            raise SystemExit(str(e))
        print(f"OK -> {user.email} ({user.role})")
    finally:
        close(client)


if __name__ == "__main__":
    main()
