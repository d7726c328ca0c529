import pytest

from portal.auth.passwords import hash_password, verify_password


def test_hash_is_salted_and_never_plaintext():
    h1 = hash_password("secret1")
    h2 = hash_password("secret1")
    assert "secret1" not in h1
    assert h1.startswith("$argon2")
    assert h1 != h2


def test_verify_matches_only_the_hashed_password():
    h = hash_password("secret1")
    assert verify_password(h, "secret1")
    assert not verify_password(h, "wrong12")


def test_verify_rejects_empty_or_malformed_input():
    assert not verify_password("", "secret1")
    assert not verify_password(hash_password("secret1"), "")
    assert not verify_password("not-a-hash", "secret1")


def test_hash_refuses_empty_password():
    with pytest.raises(ValueError):
        hash_password("")


def test_bcrypt_hash_never_verifies():
    legacy = "$2b$12$KIXQJ5r0vJ7m0e6iR0bP3uJ7n9gYcFh3kqv1mF2p6x8y0z4aB1cDe"
    assert not verify_password(legacy, "secret1")
