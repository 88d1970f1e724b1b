"""Tests for password hashing and access/refresh token helpers."""

from datetime import timedelta

import pytest

from unlocker.core.security import (
    TokenExpired,
    TokenInvalid,
    create_access_token,
    decode_access_token,
    generate_refresh_token,
    hash_password,
    refresh_token_expiry,
    utcnow,
    verify_password,
)


class TestPasswordHashing:
    def test_hash_and_verify(self) -> None:
        hashed = hash_password("secret123")
        assert hashed != "secret123"
        assert verify_password("secret123", hashed)
        assert not verify_password("wrong", hashed)


class TestAccessToken:
    def test_round_trip_claims(self) -> None:
        token = create_access_token(7, "alice123")
        assert decode_access_token(token) == {"user_id": 7, "username": "alice123"}

    def test_expired_token(self) -> None:
        token = create_access_token(7, "alice123", expires_minutes=-1)
        with pytest.raises(TokenExpired):
            decode_access_token(token)

    def test_tampered_token(self) -> None:
        token = create_access_token(7, "alice123")
        with pytest.raises(TokenInvalid):
            decode_access_token(token[:-2] + ("aa" if token[-2:] != "aa" else "bb"))

    def test_garbage(self) -> None:
        with pytest.raises(TokenInvalid):
            decode_access_token("not-a-jwt")


class TestRefreshToken:
    def test_opaque_and_random(self) -> None:
        a, b = generate_refresh_token(), generate_refresh_token()
        assert a != b
        assert len(a) == 80
        int(a, 16)

    def test_expiry_in_future(self) -> None:
        exp = refresh_token_expiry(days=7)
        assert timedelta(days=6, hours=23) < exp - utcnow() <= timedelta(days=7)
