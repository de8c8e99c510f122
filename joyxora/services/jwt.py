"""JWT Token Service."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from joyxora.clock import utcnow
from joyxora.errors import AuthError
from joyxora.models.user import User

logger = logging.getLogger("joyxora")

INVALID_TOKEN = "invalid or expired token"


@dataclass(frozen=True)
class TokenClaims:
    """Verified identity carried by a bearer token."""

    user_id: int
    email: str
    username: str
    expires_at: datetime


class TokenIssuer:
    """Handles JWT token creation and validation."""

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 7 * 24 * 60) -> None:
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue(self, user: User, now: datetime | None = None) -> str:
        """Create a signed token for the given user."""
        issued_at = now or utcnow()
        payload = {
            "sub": str(user.id),
            "id": user.id,
            "email": user.email,
            "username": user.username,
            "iat": issued_at,
            "exp": issued_at + timedelta(minutes=self.expire_minutes),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """Decode and validate a token.

        Expired, forged and malformed tokens all raise the same AuthError; only
        the log records which one it was.
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            logger.info("Rejected bearer token: expired")
            raise AuthError(INVALID_TOKEN) from None
        except JWTError as e:
            logger.info("Rejected bearer token: %s", e)
            raise AuthError(INVALID_TOKEN) from None

        try:
            return TokenClaims(
                user_id=int(payload["id"]),
                email=payload["email"],
                username=payload["username"],
                expires_at=datetime.fromtimestamp(payload["exp"], timezone.utc).replace(tzinfo=None),
            )
        except (KeyError, TypeError, ValueError):
            logger.info("Rejected bearer token: missing or malformed claims")
            raise AuthError(INVALID_TOKEN) from None
