import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

import mongomock
import pytest
from fastapi.testclient import TestClient

from portal.app import create_app
from portal.auth.passwords import hash_password
from portal.config import Settings
from portal.infra.mongo import SESSIONS, USERS
from portal.infra.user_repo import UserRepository


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        mongodb_database="portal_test",
        mongodb_url="mongodb://localhost:27017/portal_test",
        session_secret="test-session-secret",
        session_store_secret="test-store-secret",
    )


@pytest.fixture()
def mongo():
    return mongomock.MongoClient()


@pytest.fixture()
def db(mongo, settings):
    return mongo[settings.mongodb_database]


@pytest.fixture()
def app(settings, mongo):
    return create_app(settings=settings, client_factory=lambda _s: mongo)


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def users(db) -> UserRepository:
    return UserRepository(db[USERS])


@pytest.fixture()
def sessions_collection(db):
    return db[SESSIONS]


@pytest.fixture()
def seed_user(users):
    """Insert a user directly in the store, as an operator would."""

    def _seed(name: str, email: str, password: str, role: str = "user"):
        return users.insert(name=name, email=email, password_hash=hash_password(password), role=role)

    return _seed


@pytest.fixture()
def login():
    def _login(client, email: str, password: str):
        return client.post("/login", data={"email": email, "password": password}, follow_redirects=False)

    return _login
