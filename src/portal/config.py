# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional
from urllib.parse import quote_plus

from dotenv import load_dotenv
from pydantic import BaseModel


def _flag(value: str) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "y"}


class Settings(BaseModel):
    # Database
    mongodb_user: str = ""
    mongodb_password: str = ""
    mongodb_host: str = ""
    mongodb_database: str = ""
    mongodb_url: Optional[str] = None

    # Sessions
    session_secret: str = ""
    session_store_secret: str = ""
    session_ttl_seconds: int = 60 * 60  # 1 hour
    cookie_name: str = "portal_session"
    cookie_secure: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 3340
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            mongodb_user=os.getenv("MONGODB_USER", ""),
            mongodb_password=os.getenv("MONGODB_PASSWORD", ""),
            mongodb_host=os.getenv("MONGODB_HOST", ""),
            mongodb_database=os.getenv("MONGODB_DATABASE", ""),
            mongodb_url=os.getenv("MONGODB_URL") or None,
            session_secret=os.getenv("SESSION_SECRET", ""),
            session_store_secret=os.getenv("MONGODB_SESSION_SECRET", ""),
            session_ttl_seconds=int(os.getenv("PORTAL_SESSION_TTL", "3600")),
            cookie_name=os.getenv("PORTAL_COOKIE_NAME", "portal_session"),
            cookie_secure=_flag(os.getenv("PORTAL_COOKIE_SECURE", "false")),
            host=os.getenv("PORTAL_HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3340")),
            log_level=os.getenv("PORTAL_LOG_LEVEL", "INFO").upper(),
        )

    def mongo_url(self) -> str:
        if self.mongodb_url:
            return self.mongodb_url
        user = quote_plus(self.mongodb_user)
        password = quote_plus(self.mongodb_password)
        return f"mongodb+srv://{user}:{password}@{self.mongodb_host}/{self.mongodb_database}?retryWrites=true"

    def check(self) -> None:
        """Raise if the settings cannot run the app; called once at startup."""
        missing = []
        if not self.session_secret:
            missing.append("SESSION_SECRET")
        if not self.session_store_secret:
            missing.append("MONGODB_SESSION_SECRET")
        if not self.mongodb_database:
            missing.append("MONGODB_DATABASE")
        if not self.mongodb_url and not self.mongodb_host:
            missing.append("MONGODB_HOST (or MONGODB_URL)")
        if missing:
            raise RuntimeError("Missing configuration: " + ", ".join(missing))


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
