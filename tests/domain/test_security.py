from datetime import timedelta

import jwt
import pytest

from medstore import settings
from medstore.shared.security import (
    InvalidTokenError,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


class TestPasswords:
    def test_hash_verifies(self):
        hashed = hash_password("secret123")
        assert hashed.startswith("$2")
        assert verify_password("secret123", hashed)

    def test_wrong_password(self):
        assert not verify_password("nope", hash_password("secret123"))

    def test_empty_values(self):
        assert not verify_password("", hash_password("secret123"))
        assert not verify_password("secret123", "")


class TestTokens:
    def test_round_trip_carries_user_id(self):
        token = create_access_token("user-1")
        assert decode_access_token(token) == "user-1"

    def test_expired_token(self):
        token = create_access_token("user-1", expires_in=timedelta(seconds=-1))
        with pytest.raises(InvalidTokenError):
            decode_access_token(token)

    def test_tampered_payload(self):
        header, _, signature = create_access_token("user-1").split(".")
        forged_payload = create_access_token("user-2").split(".")[1]
        with pytest.raises(InvalidTokenError):
            decode_access_token(f"{header}.{forged_payload}.{signature}")

    def test_token_signed_with_other_secret(self):
        token = jwt.encode({"sub": "user-1"}, "another-secret", algorithm="HS256")
        with pytest.raises(InvalidTokenError):
            decode_access_token(token)

    def test_token_without_subject(self):
        token = jwt.encode({"role": "admin"}, settings.jwt_secret(), algorithm="HS256")
        with pytest.raises(InvalidTokenError):
            decode_access_token(token)
