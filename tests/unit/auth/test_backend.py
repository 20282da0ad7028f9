"""Unit tests for auth backend (JWT and password handling)."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from jose import jwt

from gatekeeper.config import settings
from gatekeeper.core.auth.backend import (
    create_access_token,
    decode_token,
    get_token_expiration,
    hash_password,
    hash_token,
    verify_password,
)


pytestmark = pytest.mark.unit


class TestPasswordHashing:
    """Tests for password hashing functions."""

    def test_hash_password_returns_bcrypt_hash(self):
        """hash_password should return a bcrypt hash."""
        hashed = hash_password("Secret@123")

        assert hashed != "Secret@123"
        assert hashed.startswith("$2b$")

    def test_hash_password_different_each_time(self):
        """Random salts make two hashes of one password differ."""
        assert hash_password("Secret@123") != hash_password("Secret@123")

    def test_verify_password_correct(self):
        hashed = hash_password("Secret@123")

        assert verify_password("Secret@123", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = hash_password("Secret@123")

        assert verify_password("Wrong@123", hashed) is False


class TestAccessTokens:
    """Tests for JWT token functions."""

    def test_token_carries_identity_claims(self):
        """The token should carry id, sub, email, type and a jti."""
        user_id = uuid4()
        token = create_access_token(user_id, "alice@example.com")

        claims = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])

        assert claims["id"] == str(user_id)
        assert claims["sub"] == str(user_id)
        assert claims["email"] == "alice@example.com"
        assert claims["type"] == "access"
        assert claims["jti"]

    def test_token_claim_set_is_fixed(self):
        token = create_access_token(uuid4(), "alice@example.com")

        claims = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])

        assert set(claims) == {"id", "sub", "email", "exp", "iat", "type", "jti"}

    def test_extra_claims_are_not_accepted(self):
        with pytest.raises(TypeError):
            create_access_token(  # type: ignore[call-arg]
                uuid4(), "alice@example.com", additional_claims={"admin": True}
            )

    def test_tokens_issued_back_to_back_differ(self):
        """Two tokens for the same user in the same second must differ."""
        user_id = uuid4()

        first = create_access_token(user_id, "alice@example.com")
        second = create_access_token(user_id, "alice@example.com")

        assert first != second
        assert hash_token(first) != hash_token(second)

    def test_decode_valid_token(self):
        user_id = uuid4()
        token = create_access_token(user_id, "alice@example.com")

        data = decode_token(token)

        assert data is not None
        assert data.user_id == user_id
        assert data.email == "alice@example.com"
        assert data.type == "access"

    def test_decode_expired_token_returns_none(self):
        token = create_access_token(
            uuid4(),
            "alice@example.com",
            expires_at=datetime.now(UTC) - timedelta(minutes=1),
        )

        assert decode_token(token) is None

    def test_decode_token_signed_with_other_key_returns_none(self):
        token = jwt.encode(
            {
                "sub": str(uuid4()),
                "email": "alice@example.com",
                "exp": datetime.now(UTC) + timedelta(minutes=5),
            },
            "another-secret-key-that-is-long-enough",
            algorithm="HS256",
        )

        assert decode_token(token) is None

    def test_decode_garbage_returns_none(self):
        assert decode_token("not-a-jwt") is None

    def test_get_token_expiration_uses_configured_lifetime(self):
        before = datetime.now(UTC)
        expires_at = get_token_expiration()

        expected = before + timedelta(minutes=settings.access_token_expire_minutes)
        assert abs((expires_at - expected).total_seconds()) < 5


class TestHashToken:
    """Tests for token hashing."""

    def test_hash_token_is_sha256_hex(self):
        digest = hash_token("abc")

        assert len(digest) == 64
        assert digest == hash_token("abc")
        assert digest != hash_token("abd")
