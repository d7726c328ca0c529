# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Errors raised by handlers and services, each mapped to one HTTP status."""

from __future__ import annotations

from typing import Iterable, List, Optional


class PortalError(Exception):
    status_code = 500
    title = "Error"

    def __init__(
        self,
        messages: Iterable[str] | str = (),
        *,
        title: Optional[str] = None,
        back_url: str = "/",
    ) -> None:
        if isinstance(messages, str):
            messages = [messages]
        self.messages: List[str] = list(messages)
        if title:
            self.title = title
        self.back_url = back_url
        super().__init__("; ".join(self.messages) or self.title)


class ValidationError(PortalError):
    status_code = 400
    title = "Invalid input"


class ConflictError(PortalError):
    status_code = 400
    title = "Conflict"


class AuthError(PortalError):
    status_code = 400
    title = "Login failed"


class AuthorizationError(PortalError):
    status_code = 403
    title = "Forbidden"


class NotFoundError(PortalError):
    status_code = 404
    title = "Not found"


class InternalError(PortalError):
    status_code = 500
    title = "Internal Server Error"
