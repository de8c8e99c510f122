"""Password reset token generation."""

import secrets
from datetime import datetime, timedelta


class ResetTokenManager:
    """Creates opaque single-use reset tokens and their expiry instants."""

    def __init__(self, expire_minutes: int = 60) -> None:
        self.lifetime = timedelta(minutes=expire_minutes)

    def generate(self) -> str:
        # 32 random bytes, urlsafe base64
        return secrets.token_urlsafe(32)

    def expiry_for(self, now: datetime) -> datetime:
        return now + self.lifetime
