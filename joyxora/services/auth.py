"""Credential lifecycle service: register, authenticate, reset, read-self."""

import logging
from dataclasses import dataclass

from joyxora.clock import Clock, utcnow
from joyxora.errors import AuthError, NotFoundError, ValidationError
from joyxora.models.user import User
from joyxora.services.jwt import INVALID_TOKEN, TokenClaims, TokenIssuer
from joyxora.services.notifier import NotificationDispatcher
from joyxora.services.passwords import BCRYPT_MAX_BYTES, PasswordHasher, password_too_long
from joyxora.services.reset_tokens import ResetTokenManager
from joyxora.store import CredentialStore

logger = logging.getLogger("joyxora")

INVALID_CREDENTIALS = "Invalid email or password"


@dataclass
class AuthResult:
    """Outcome of a successful register or authenticate call."""

    token: str
    user: User


def derive_username(email: str) -> str:
    """Username defaults to the email local-part."""
    return email.split("@", 1)[0]


class CredentialService:
    """Orchestrates the store, hasher and token services for each credential operation."""

    def __init__(
        self,
        store: CredentialStore,
        hasher: PasswordHasher,
        token_issuer: TokenIssuer,
        reset_tokens: ResetTokenManager,
        dispatcher: NotificationDispatcher,
        min_password_length: int = 8,
        clock: Clock = utcnow,
    ) -> None:
        self.store = store
        self.hasher = hasher
        self.token_issuer = token_issuer
        self.reset_tokens = reset_tokens
        self.dispatcher = dispatcher
        self.min_password_length = min_password_length
        self.clock = clock
        # Compared against when the email is unknown so both failure paths cost one bcrypt check.
        self._dummy_hash = hasher.hash("joyxora-timing-equalizer")

    def _check_password_length(self, password: str) -> None:
        if len(password) < self.min_password_length:
            raise ValidationError(f"Password must be at least {self.min_password_length} characters")
        if password_too_long(password):
            raise ValidationError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes")

    def register(self, email: str | None, password: str | None, username: str | None = None) -> AuthResult:
        """Create an account and sign it in.

        There is no lookup before the insert: a duplicate email or username is
        reported by the store's uniqueness constraint as ConflictError.
        """
        if not email or not password:
            raise ValidationError("Email and password are required")
        if "@" not in email or not derive_username(email):
            raise ValidationError("A valid email address is required")
        self._check_password_length(password)

        username = (username or "").strip() or derive_username(email)
        password_hash = self.hasher.hash(password)
        user = self.store.insert(email=email, username=username, password_hash=password_hash)
        logger.info("Registered user id=%s", user.id)

        self.dispatcher.send_welcome(user.email, user.username)
        return AuthResult(token=self.token_issuer.issue(user, now=self.clock()), user=user)

    def authenticate(self, email: str | None, password: str | None) -> AuthResult:
        """Sign in with email and password."""
        if not email or not password:
            raise ValidationError("Email and password required")

        user = self.store.find_by_email(email)
        if user is None:
            self.hasher.verify(password, self._dummy_hash)
            raise AuthError(INVALID_CREDENTIALS)
        if not self.hasher.verify(password, user.password_hash):
            raise AuthError(INVALID_CREDENTIALS)

        return AuthResult(token=self.token_issuer.issue(user, now=self.clock()), user=user)

    def request_reset(self, email: str | None) -> None:
        """Issue a reset token if the account exists.

        Returns nothing either way so callers cannot tell registered emails apart.
        Unknown emails go through the same lookup and UPDATE, which matches no row.
        """
        if not email:
            raise ValidationError("Email is required")

        user = self.store.find_by_email(email)
        token = self.reset_tokens.generate()
        expires_at = self.reset_tokens.expiry_for(self.clock())
        updated = self.store.set_reset_token(email, token, expires_at)
        if user is None or not updated:
            logger.info("Password reset requested for unknown email")
            return
        self.dispatcher.send_reset_link(user.email, user.username, token)

    def consume_reset(self, token: str | None, new_password: str | None) -> User:
        """Set a new password using a live reset token. The token cannot be used again."""
        if not token or not new_password:
            raise ValidationError("Token and new password required")
        self._check_password_length(new_password)

        password_hash = self.hasher.hash(new_password)
        user = self.store.reset_password(token, password_hash, now=self.clock())
        if user is None:
            raise AuthError(INVALID_TOKEN)
        logger.info("Password reset completed for user id=%s", user.id)
        return user

    def read_self(self, identity: TokenClaims) -> User:
        user = self.store.find_by_id(identity.user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user
