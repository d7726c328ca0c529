# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING
from pymongo.collection import Collection

ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLES = (ROLE_USER, ROLE_ADMIN)


@dataclass(frozen=True)
class UserRecord:
    id: str
    name: str
    email: str
    password_hash: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def _to_record(doc: Dict[str, Any]) -> UserRecord:
    role = str(doc.get("user_type") or ROLE_USER).strip().lower()
    return UserRecord(
        id=str(doc["_id"]),
        name=str(doc.get("name") or ""),
        email=str(doc.get("email") or ""),
        password_hash=str(doc.get("password") or ""),
        role=role if role in ROLES else ROLE_USER,
    )


def parse_object_id(value: str) -> Optional[ObjectId]:
    try:
        return ObjectId(str(value or "").strip())
    except (InvalidId, TypeError):
        return None


class UserRepository:
    """Users collection. The role lives in the ``user_type`` field."""

    def __init__(self, collection: Collection) -> None:
        self.collection = collection

    def find_by_email(self, email: str) -> Optional[UserRecord]:
        e = (email or "").strip()
        if not e:
            return None
        doc = self.collection.find_one({"email": e})
        return _to_record(doc) if doc else None

    def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        oid = parse_object_id(user_id)
        if oid is None:
            return None
        doc = self.collection.find_one({"_id": oid})
        return _to_record(doc) if doc else None

    def insert(self, *, name: str, email: str, password_hash: str, role: str = ROLE_USER) -> UserRecord:
        if role not in ROLES:
            raise ValueError(f"Unknown role '{role}'")
        doc = {"name": name, "email": email, "password": password_hash, "user_type": role}
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return _to_record(doc)

    def list_all(self) -> List[UserRecord]:
        return [_to_record(d) for d in self.collection.find({}).sort("name", ASCENDING)]

    def set_role(self, user_id: str, role: str) -> bool:
        """Return False when no user has that id."""
        if role not in ROLES:
            raise ValueError(f"Unknown role '{role}'")
        oid = parse_object_id(user_id)
        if oid is None:
            return False
        result = self.collection.update_one({"_id": oid}, {"$set": {"user_type": role}})
        return result.matched_count > 0

    def count(self) -> int:
        return self.collection.count_documents({})
