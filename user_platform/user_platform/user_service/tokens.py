"""Stateless bearer tokens.

Tokens are compact HS256 JWS strings (header.claims.signature). Verification needs
only the server secret, never the database, so a token stays valid until the secret
changes (or until its exp claim, when a TTL is configured).
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from pydantic import ValidationError

from .config import Settings
from .errors import InvalidTokenError
from .schemas import TokenClaims

logger = logging.getLogger(__name__)

# RFC 7518 section 3.2: HS256 keys must be at least as long as the hash output
MIN_SECRET_BYTES = 32


@dataclass(frozen=True)
class ServerSecret:
    """Symmetric signing key shared by token signing and verification."""

    key: bytes = field(repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.key, bytes):
            raise TypeError("ServerSecret key must be bytes")
        if len(self.key) < MIN_SECRET_BYTES:
            raise ValueError(f"ServerSecret key must be at least {MIN_SECRET_BYTES} bytes")

    @classmethod
    def from_settings(cls, settings: Settings) -> "ServerSecret":
        return cls(settings.SECRET_KEY.get_secret_value().encode("utf-8"))


class TokenService:
    """Signs identity claims into bearer tokens and verifies them."""

    ALGORITHM = "HS256"

    def __init__(self, ttl: Optional[timedelta] = None) -> None:
        self._ttl = ttl

    def sign(self, claims: TokenClaims, secret: ServerSecret) -> str:
        """Sign claims with the secret.

        No exp claim is added unless the service was built with a TTL.
        """
        payload = claims.model_dump(mode="json")
        if self._ttl is not None:
            payload["exp"] = datetime.now(timezone.utc) + self._ttl
        return jwt.encode(payload, secret.key, algorithm=self.ALGORITHM)

    def verify(self, token: str, secret: ServerSecret) -> TokenClaims:
        """Check the token signature and return its claims.

        Raises:
            InvalidTokenError: On a malformed token, a signature that does not
                match, an expired token, or claims that are not an identity.
        """
        try:
            payload = jwt.decode(token, secret.key, algorithms=[self.ALGORITHM])
        except jwt.InvalidTokenError as e:
            logger.debug("Token rejected: %s", type(e).__name__)
            raise InvalidTokenError("Invalid token") from e

        try:
            return TokenClaims.model_validate(payload)
        except ValidationError as e:
            logger.debug("Token claims are not an identity")
            raise InvalidTokenError("Invalid token") from e
