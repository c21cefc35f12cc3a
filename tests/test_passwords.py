"""Tests for bcrypt password hashing."""

from tubeline.auth.passwords import hash_password, verify_password


def test_hash_round_trip():
    password_hash = hash_password("secret", rounds=4)
    assert password_hash != "secret"
    assert verify_password("secret", password_hash) is True


def test_wrong_password_fails():
    password_hash = hash_password("secret", rounds=4)
    assert verify_password("wrong", password_hash) is False


def test_empty_inputs_fail():
    password_hash = hash_password("secret", rounds=4)
    assert verify_password("", password_hash) is False
    assert verify_password("secret", "") is False


def test_malformed_hash_fails():
    assert verify_password("secret", "not-a-bcrypt-hash") is False


def test_long_passwords_are_truncated_not_rejected():
    long_password = "p" * 100
    password_hash = hash_password(long_password, rounds=4)
    assert verify_password(long_password, password_hash) is True
