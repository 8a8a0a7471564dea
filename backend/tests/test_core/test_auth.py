"""
Unit tests for password hashing and access tokens

Author: Thriftly
Date: 2026-10-19
"""
from datetime import timedelta

import pytest
from fastapi import HTTPException
from jose import jwt

from thriftly.core.auth import create_access_token, decode_access_token


class TestPasswordHasher:

    def test_hash_and_verify(self, hasher):
        hashed = hasher.hash("secret123")

        assert hashed != "secret123"
        assert hasher.verify("secret123", hashed)
        assert not hasher.verify("Secret123", hashed)

    def test_hashes_are_salted(self, hasher):
        assert hasher.hash("secret123") != hasher.hash("secret123")

    def test_malformed_hash_does_not_verify(self, hasher):
        assert hasher.verify("secret123", "not-a-hash") is False


class TestAccessTokens:

    def test_round_trip(self):
        token = create_access_token(42)

        payload = decode_access_token(token)

        assert payload.sub == "42"

    def test_expired_token(self):
        token = create_access_token(42, expires_in=timedelta(seconds=-10))

        with pytest.raises(HTTPException) as exc_info:
            decode_access_token(token)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Token has expired"

    def test_token_signed_with_another_secret(self):
        token = jwt.encode({"sub": "42", "exp": 9999999999}, "another-secret", algorithm="HS256")

        with pytest.raises(HTTPException) as exc_info:
            decode_access_token(token)

        assert exc_info.value.status_code == 401
