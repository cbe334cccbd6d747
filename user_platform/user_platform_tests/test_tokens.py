"""
Unit tests for bearer token signing and verification.
"""
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from user_platform.user_service.config import Settings
from user_platform.user_service.errors import InvalidTokenError
from user_platform.user_service.models import User
from user_platform.user_service.schemas import TokenClaims
from user_platform.user_service.tokens import ServerSecret, TokenService

from .helpers import replace_char


def unverified_payload(token: str) -> dict:
    return jwt.decode(token, options={"verify_signature": False})


def test_sign_then_verify_returns_same_claims(token_service, secret, claims):
    token = token_service.sign(claims, secret)
    assert token_service.verify(token, secret) == claims


def test_token_has_three_segments(token_service, secret, claims):
    assert len(token_service.sign(claims, secret).split(".")) == 3


def test_signing_is_deterministic(token_service, secret, claims):
    assert token_service.sign(claims, secret) == token_service.sign(claims, secret)


def test_other_secret_is_rejected(token_service, secret, claims):
    token = token_service.sign(claims, secret)
    other = ServerSecret(b"another-secret-key-of-at-least-32-bytes")

    with pytest.raises(InvalidTokenError):
        token_service.verify(token, other)


@pytest.mark.parametrize("segment", [0, 1, 2])
def test_mutated_token_is_rejected(token_service, secret, claims, segment):
    token = token_service.sign(claims, secret)
    index = len(token.split(".")[segment]) // 2

    with pytest.raises(InvalidTokenError):
        token_service.verify(replace_char(token, segment, index), secret)


def test_every_claims_position_is_protected(token_service, secret, claims):
    token = token_service.sign(claims, secret)
    # The last character of a segment may only carry padding bits
    for index in range(len(token.split(".")[1]) - 1):
        with pytest.raises(InvalidTokenError):
            token_service.verify(replace_char(token, 1, index), secret)


@pytest.mark.parametrize("token", ["", "not-a-token", "a.b", "a.b.c.d", "!!!.???.***"])
def test_malformed_token_is_rejected(token_service, secret, token):
    with pytest.raises(InvalidTokenError):
        token_service.verify(token, secret)


def test_unsigned_token_is_rejected(token_service, secret, claims):
    token = jwt.encode(claims.model_dump(mode="json"), None, algorithm="none")

    with pytest.raises(InvalidTokenError):
        token_service.verify(token, secret)


def test_token_without_identity_is_rejected(token_service, secret):
    token = jwt.encode({"foo": "bar"}, secret.key, algorithm="HS256")

    with pytest.raises(InvalidTokenError):
        token_service.verify(token, secret)


def test_no_expiry_by_default(token_service, secret, claims):
    assert "exp" not in unverified_payload(token_service.sign(claims, secret))


def test_ttl_adds_expiry(secret, claims):
    service = TokenService(ttl=timedelta(minutes=5))
    token = service.sign(claims, secret)

    assert "exp" in unverified_payload(token)
    assert service.verify(token, secret) == claims


def test_expired_token_is_rejected(secret, claims):
    service = TokenService(ttl=timedelta(seconds=-10))

    with pytest.raises(InvalidTokenError):
        service.verify(service.sign(claims, secret), secret)


def test_claims_from_user_never_include_password(token_service, secret):
    user = User(
        id=7,
        firstname="Ada",
        lastname="Lovelace",
        email="a@b.com",
        password="$argon2id$v=19$m=8,t=1,p=1$c2FsdA$aGFzaA",
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )
    token = token_service.sign(TokenClaims.model_validate(user), secret)
    payload = unverified_payload(token)

    assert "password" not in payload
    assert "argon2" not in token
    assert payload["email"] == "a@b.com"
    assert payload["id"] == 7


def test_secret_is_hidden_from_repr(secret):
    assert secret.key.decode() not in repr(secret)


def test_secret_is_immutable(secret):
    with pytest.raises(AttributeError):
        secret.key = b"x" * 40


def test_short_secret_is_rejected():
    with pytest.raises(ValueError):
        ServerSecret(b"123456")


def test_secret_from_settings():
    settings = Settings(_env_file=None, SECRET_KEY="k" * 32)
    assert ServerSecret.from_settings(settings).key == b"k" * 32
