import pytest

from portal.auth.passwords import verify_password
from portal.errors import AuthError, ConflictError, NotFoundError
from portal.schemas import LoginForm, SignupForm
from portal.services.account_service import authenticate, change_role, register


def test_register_stores_hashed_password_and_default_role(users):
    user = register(users, SignupForm(name="Ann", email="ann@x.com", password="secret1"))
    stored = users.find_by_email("ann@x.com")
    assert stored == user
    assert stored.role == "user"
    assert stored.password_hash != "secret1"
    assert verify_password(stored.password_hash, "secret1")


def test_register_duplicate_email_inserts_nothing(users, seed_user):
    seed_user("Ann", "ann@x.com", "secret1")
    before = users.count()
    with pytest.raises(ConflictError) as ei:
        register(users, SignupForm(name="Other", email="ann@x.com", password="another1"))
    assert "already registered" in ei.value.messages[0]
    assert users.count() == before


def test_authenticate_returns_stored_record(users, seed_user):
    seed_user("Ann", "ann@x.com", "secret1")
    user = authenticate(users, LoginForm(email="ann@x.com", password="secret1"))
    assert user.name == "Ann"


def test_authenticate_distinguishes_unknown_user_and_wrong_password(users, seed_user):
    seed_user("Ann", "ann@x.com", "secret1")
    with pytest.raises(AuthError) as unknown:
        authenticate(users, LoginForm(email="bob@x.com", password="secret1"))
    with pytest.raises(AuthError) as wrong:
        authenticate(users, LoginForm(email="ann@x.com", password="wrong12"))
    assert unknown.value.messages == ["User not found!"]
    assert wrong.value.messages == ["Incorrect password!"]


def test_change_role_round_trip(users, seed_user):
    ann = seed_user("Ann", "ann@x.com", "secret1")
    assert change_role(users, ann.id, "admin").role == "admin"
    assert change_role(users, ann.id, "user").role == "user"


def test_change_role_unknown_or_invalid_id(users):
    with pytest.raises(NotFoundError):
        change_role(users, "not-an-id", "admin")
    with pytest.raises(NotFoundError):
        change_role(users, "0123456789abcdef01234567", "admin")
    with pytest.raises(ValueError):
        change_role(users, "0123456789abcdef01234567", "superuser")
