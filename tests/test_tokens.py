"""Tests for bearer tokens and reset tokens."""

from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest
from jose import jwt

from joyxora.clock import utcnow
from joyxora.errors import AuthError
from joyxora.services.jwt import TokenIssuer
from joyxora.services.reset_tokens import ResetTokenManager

USER = SimpleNamespace(id=7, email="a@x.com", username="a")


def flip_signature_char(token: str) -> str:
    """Change one character in the middle of the signature segment."""
    header, payload, signature = token.split(".")
    chars = list(signature)
    chars[10] = "A" if chars[10] != "A" else "B"
    return ".".join([header, payload, "".join(chars)])


class TestTokenIssuer:
    """Tests for JWT issuance and verification."""

    def test_issue_and_verify(self, token_issuer: TokenIssuer):
        """A freshly issued token verifies and carries the identity."""
        claims = token_issuer.verify(token_issuer.issue(USER))
        assert claims.user_id == 7
        assert claims.email == "a@x.com"
        assert claims.username == "a"

    def test_expiry_is_seven_days(self, token_issuer: TokenIssuer):
        """Tokens expire seven days after issuance."""
        now = utcnow().replace(microsecond=0)
        claims = token_issuer.verify(token_issuer.issue(USER, now=now))
        assert claims.expires_at == now + timedelta(days=7)

    def test_payload_claims(self, token_issuer: TokenIssuer):
        payload = jwt.get_unverified_claims(token_issuer.issue(USER))
        assert payload["sub"] == "7"
        assert payload["id"] == 7
        assert {"email", "username", "iat", "exp"} <= payload.keys()

    def test_expired_token_rejected(self, token_issuer: TokenIssuer):
        """A token past its expiry is rejected."""
        token = token_issuer.issue(USER, now=utcnow() - timedelta(days=8))
        with pytest.raises(AuthError) as exc_info:
            token_issuer.verify(token)
        assert exc_info.value.message == "invalid or expired token"

    def test_tampered_signature_rejected(self, token_issuer: TokenIssuer):
        """Altering the signature yields the same error as expiry."""
        with pytest.raises(AuthError) as exc_info:
            token_issuer.verify(flip_signature_char(token_issuer.issue(USER)))
        assert exc_info.value.message == "invalid or expired token"

    def test_wrong_secret_rejected(self, token_issuer: TokenIssuer):
        token = TokenIssuer("another-secret").issue(USER)
        with pytest.raises(AuthError):
            token_issuer.verify(token)

    @pytest.mark.parametrize("token", ["", "garbage", "a.b.c", "invalid.token.here"])
    def test_malformed_token_rejected(self, token_issuer: TokenIssuer, token: str):
        with pytest.raises(AuthError):
            token_issuer.verify(token)

    def test_missing_claims_rejected(self, token_issuer: TokenIssuer):
        """A validly signed token without identity claims is rejected."""
        token = jwt.encode({"sub": "7", "exp": utcnow() + timedelta(hours=1)}, "test-secret-key", algorithm="HS256")
        with pytest.raises(AuthError):
            token_issuer.verify(token)


class TestResetTokenManager:
    """Tests for reset token generation."""

    def test_tokens_are_long_and_unique(self):
        manager = ResetTokenManager()
        tokens = {manager.generate() for _ in range(50)}
        assert len(tokens) == 50
        # 32 random bytes encode to 43 urlsafe base64 characters
        assert all(len(t) >= 43 for t in tokens)

    def test_default_expiry_is_one_hour(self):
        now = datetime(2026, 1, 1, 12, 0, 0)
        assert ResetTokenManager().expiry_for(now) == datetime(2026, 1, 1, 13, 0, 0)

    def test_configurable_expiry(self):
        now = datetime(2026, 1, 1, 12, 0, 0)
        assert ResetTokenManager(15).expiry_for(now) == now + timedelta(minutes=15)
