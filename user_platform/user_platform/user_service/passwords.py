"""Password hashing using Argon2id.

Records are self-describing PHC strings ($argon2id$v=19$m=...,t=...,p=...$salt$hash),
so old records keep verifying with their own parameters after the defaults change.
"""
import logging
import threading
from typing import Optional

from argon2 import PasswordHasher as Argon2Hasher
from argon2 import exceptions as argon2_exceptions

from .errors import HashingError

logger = logging.getLogger(__name__)


def _encode(plaintext: str) -> bytes:
    # Lone surrogates from JSON input are kept, so no password is ever rejected
    return plaintext.encode("utf-8", "surrogatepass")


class PasswordHasher:
    """Hashes and verifies passwords.

    At most ``max_concurrency`` Argon2 computations run at once; further callers
    block until a slot is free, so a login flood cannot exhaust memory.
    """

    def __init__(
        self,
        time_cost: Optional[int] = None,
        memory_cost: Optional[int] = None,
        parallelism: Optional[int] = None,
        max_concurrency: int = 4,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        overrides = {
            "time_cost": time_cost,
            "memory_cost": memory_cost,
            "parallelism": parallelism,
        }
        self._hasher = Argon2Hasher(**{k: v for k, v in overrides.items() if v is not None})
        self._slots = threading.BoundedSemaphore(max_concurrency)

    def hash(self, plaintext: str) -> str:
        """Hash a password with a fresh random salt.

        Raises:
            HashingError: If Argon2 or the random source fails.
        """
        try:
            with self._slots:
                return self._hasher.hash(_encode(plaintext))
        except (argon2_exceptions.HashingError, OSError) as e:
            logger.error("Password hashing failed: %s", type(e).__name__)
            raise HashingError("Unable to hash password") from e

    def verify(self, plaintext: str, record: str) -> bool:
        """Check a password against a stored record.

        Returns False both for a wrong password and for a record that cannot be
        parsed; only the log tells them apart.
        """
        if not isinstance(record, str) or not record:
            logger.warning("Password record is empty or not a string")
            return False

        try:
            with self._slots:
                return self._hasher.verify(record, _encode(plaintext))
        except argon2_exceptions.VerifyMismatchError:
            logger.debug("Password does not match stored record")
            return False
        except (argon2_exceptions.InvalidHashError, UnicodeError):
            logger.warning("Stored password record is malformed")
            return False
        except argon2_exceptions.VerificationError as e:
            logger.warning("Password verification failed: %s", e)
            return False

    def needs_rehash(self, record: str) -> bool:
        """True if the record was produced with parameters other than the current ones."""
        try:
            return self._hasher.check_needs_rehash(record)
        except (argon2_exceptions.InvalidHashError, ValueError, TypeError):
            return False
