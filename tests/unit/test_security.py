"""Unit tests for JWT token helpers."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from jose import JWTError, jwt

from spendtrack.config import settings
from spendtrack.core.security import create_access_token, decode_token, get_user_id_from_token


def _encode(claims: dict) -> str:
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


class TestJWTTokens:
    """Test JWT token creation and validation."""

    def test_create_access_token(self):
        user_id = uuid4()
        token = create_access_token(user_id)

        payload = decode_token(token)
        assert payload["sub"] == str(user_id)
        assert payload["type"] == "access"
        assert "exp" in payload

    def test_create_access_token_custom_expiry(self):
        token = create_access_token(uuid4(), timedelta(hours=2))

        payload = decode_token(token)
        expires = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        assert expires - datetime.now(timezone.utc) > timedelta(minutes=90)

    def test_expired_token_rejected(self):
        token = create_access_token(uuid4(), timedelta(seconds=-10))

        with pytest.raises(JWTError):
            decode_token(token)

    def test_decode_invalid_token(self):
        with pytest.raises(JWTError):
            decode_token("invalid.token.string")

    def test_decode_tampered_token(self):
        token = create_access_token(uuid4())

        with pytest.raises(JWTError):
            decode_token(token[:-5] + "XXXXX")

    def test_get_user_id_from_token(self):
        user_id = uuid4()

        assert get_user_id_from_token(create_access_token(user_id)) == user_id

    def test_refresh_token_rejected(self):
        token = _encode(
            {
                "sub": str(uuid4()),
                "type": "refresh",
                "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
            }
        )

        with pytest.raises(JWTError):
            get_user_id_from_token(token)

    def test_missing_subject_rejected(self):
        token = _encode({"type": "access", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)})

        with pytest.raises(JWTError):
            get_user_id_from_token(token)

    def test_non_uuid_subject(self):
        token = _encode(
            {"sub": "not-a-uuid", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)}
        )

        with pytest.raises(ValueError):
            get_user_id_from_token(token)
