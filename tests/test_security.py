"""
Tests for password hashing and token helpers.
"""
from datetime import timedelta

import pytest
from jose import JWTError

from pathwise.core.security import (
    hash_password,
    verify_password,
    create_access_token,
    decode_access_token,
    create_oauth_state,
    verify_oauth_state,
    generate_one_time_token,
)


def test_hash_and_verify_password():
    hashed = hash_password("testpass123")

    assert hashed != "testpass123"
    assert verify_password("testpass123", hashed)
    assert not verify_password("testpass124", hashed)


def test_verify_password_without_hash():
    assert verify_password("anything", None) is False


def test_access_token_round_trip():
    token = create_access_token({"sub": "42"})

    assert decode_access_token(token)["sub"] == "42"


def test_expired_access_token():
    token = create_access_token({"sub": "42"}, expires_delta=timedelta(seconds=-5))

    with pytest.raises(JWTError):
        decode_access_token(token)


def test_oauth_state():
    assert verify_oauth_state(create_oauth_state())
    assert not verify_oauth_state(None)
    assert not verify_oauth_state("garbage")
    # a session token is not a valid state
    assert not verify_oauth_state(create_access_token({"sub": "1"}))


def test_one_time_tokens_are_unique():
    tokens = {generate_one_time_token() for _ in range(20)}

    assert len(tokens) == 20
