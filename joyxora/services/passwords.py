"""Password hashing service."""

import logging

import bcrypt

from joyxora.errors import ServerError, ValidationError

logger = logging.getLogger("joyxora")

# bcrypt only looks at the first 72 bytes, so longer passwords are refused rather than cut.
BCRYPT_MAX_BYTES = 72


def password_too_long(plaintext: str) -> bool:
    return len(plaintext.encode("utf-8")) > BCRYPT_MAX_BYTES


class PasswordHasher:
    """Salted bcrypt hashing with a tunable work factor."""

    def __init__(self, rounds: int = 10) -> None:
        self.rounds = rounds

    def hash(self, plaintext: str) -> str:
        """Hash a password.

        Raises ValidationError for passwords bcrypt cannot represent in full and
        ServerError if bcrypt cannot produce a digest.
        """
        if password_too_long(plaintext):
            raise ValidationError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes")
        try:
            return bcrypt.hashpw(plaintext.encode("utf-8"), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")
        except (ValueError, MemoryError) as e:
            logger.error("Password hashing failed: %s", type(e).__name__)
            raise ServerError("Server error") from e

    def verify(self, plaintext: str, digest: str) -> bool:
        """Check a password against a stored digest. Over-long input and malformed digests simply fail."""
        if password_too_long(plaintext):
            return False
        try:
            return bcrypt.checkpw(plaintext.encode("utf-8"), digest.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password digest could not be parsed")
            return False
