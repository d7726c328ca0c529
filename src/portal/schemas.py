# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Any, Dict, List, Type, TypeVar

from pydantic import BaseModel, EmailStr, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from portal.errors import ValidationError

NAME_MAX = 100
PASSWORD_MIN = 6
PASSWORD_MAX = 100

# Field labels, in the order messages are reported.
LABELS = {"name": "Name", "email": "Email", "password": "Password"}

F = TypeVar("F", bound=BaseModel)


def _strip(v):
    return v.strip() if isinstance(v, str) else v


class SignupForm(BaseModel):
    name: str = Field(min_length=1, max_length=NAME_MAX)
    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN, max_length=PASSWORD_MAX)

    trim_fields = field_validator("name", "email", mode="before")(_strip)


class LoginForm(BaseModel):
    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN, max_length=PASSWORD_MAX)

    trim_fields = field_validator("email", mode="before")(_strip)


def _message(field: str, err: Dict[str, Any], raw: Any) -> str:
    label = LABELS.get(field, field.capitalize())
    text = raw if isinstance(raw, str) else ""
    if field != "password":
        text = text.strip()
    if not text:
        return f"{label} is required"
    ctx = err.get("ctx") or {}
    if err.get("type") == "string_too_short":
        return f"{label} must be at least {ctx.get('min_length')} characters"
    if err.get("type") == "string_too_long":
        return f"{label} must be at most {ctx.get('max_length')} characters"
    return f"{label} must be valid"


def _field_rank(field: str) -> int:
    order = list(LABELS)
    return order.index(field) if field in order else len(order)


def parse_form(model: Type[F], data: Dict[str, Any], *, title: str, back_url: str) -> F:
    """Validate submitted form fields, collecting every problem at once."""
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        messages: List[str] = []
        for err in exc.errors():
            field = str(err["loc"][0]) if err["loc"] else ""
            msg = _message(field, err, data.get(field))
            if msg not in messages:
                messages.append(msg)
        messages.sort(key=lambda m: _field_rank(m.split(" ", 1)[0].lower()))
        raise ValidationError(messages, title=title, back_url=back_url) from exc
