# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from itsdangerous import BadData, URLSafeSerializer, URLSafeTimedSerializer
from pymongo.collection import Collection

logger = logging.getLogger(__name__)

COOKIE_SALT = "portal.session.v1"
STORE_SALT = "portal.session.store.v1"


def _utcnow() -> datetime:
    # Naive UTC: what pymongo hands back for stored dates.
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass(frozen=True)
class SessionData:
    name: str
    email: str


class SessionStore:
    """Sessions kept in a MongoDB collection, keyed by a random id.

    The client only ever holds the id, signed with the session secret. The
    stored identity snapshot is sealed with the store secret so a tampered
    document is treated the same as a missing one.
    """

    def __init__(
        self,
        collection: Collection,
        *,
        secret: str,
        store_secret: str,
        ttl_seconds: int = 3600,
    ) -> None:
        if not secret or not store_secret:
            raise RuntimeError("Session secrets are not configured")
        self.collection = collection
        self.ttl_seconds = ttl_seconds
        self._cookie = URLSafeTimedSerializer(secret_key=secret, salt=COOKIE_SALT)
        self._sealer = URLSafeSerializer(secret_key=store_secret, salt=STORE_SALT)

    def create(self, name: str, email: str) -> str:
        sid = secrets.token_urlsafe(32)
        now = _utcnow()
        self.collection.insert_one(
            {
                "_id": sid,
                "data": self._sealer.dumps({"name": name, "email": email}),
                "created_at": now,
                "expires_at": now + timedelta(seconds=self.ttl_seconds),
            }
        )
        return self._cookie.dumps(sid)

    def _session_id(self, token: str) -> Optional[str]:
        if not token:
            return None
        try:
            sid = self._cookie.loads(token, max_age=self.ttl_seconds)
        except BadData:
            return None
        return sid if isinstance(sid, str) and sid else None

    def load(self, token: str) -> Optional[SessionData]:
        sid = self._session_id(token)
        if not sid:
            return None
        doc = self.collection.find_one({"_id": sid, "expires_at": {"$gt": _utcnow()}})
        if not doc:
            return None
        try:
            data = self._sealer.loads(doc.get("data") or "")
        except BadData:
            logger.warning("Discarding session with an invalid payload seal")
            return None
        name = str((data or {}).get("name") or "")
        email = str((data or {}).get("email") or "").strip()
        if not email:
            return None
        return SessionData(name=name, email=email)

    def destroy(self, token: str) -> bool:
        sid = self._session_id(token)
        if not sid:
            return False
        result = self.collection.delete_one({"_id": sid})
        return result.deleted_count > 0
