# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from typing import Callable, Optional

from pymongo import ASCENDING, MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from portal.config import Settings

logger = logging.getLogger(__name__)

USERS = "users"
SESSIONS = "sessions"

ClientFactory = Callable[[Settings], MongoClient]


def _default_client(settings: Settings) -> MongoClient:
    return MongoClient(settings.mongo_url(), serverSelectionTimeoutMS=5000)


def connect(settings: Settings, client_factory: Optional[ClientFactory] = None) -> MongoClient:
    """Open the process-wide client and make sure the server answers.

    Raises instead of serving without a database.
    """
    client = (client_factory or _default_client)(settings)
    try:
        client.admin.command("ping")
    except PyMongoError:
        logger.exception("Failed to connect to MongoDB")
        client.close()
        raise
    logger.info("Connected to MongoDB database %s", settings.mongodb_database)
    return client


def ensure_indexes(db: Database) -> None:
    # Lookup index only: email uniqueness is checked by the signup flow.
    db[USERS].create_index([("email", ASCENDING)], name="email_lookup")
    db[SESSIONS].create_index("expires_at", name="session_ttl", expireAfterSeconds=0)


def close(client: Optional[MongoClient]) -> None:
    if client is not None:
        client.close()
        logger.info("MongoDB connection closed")
