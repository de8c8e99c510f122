"""Tests for password hashing."""

import pytest

from joyxora.errors import ValidationError
from joyxora.services.passwords import PasswordHasher


@pytest.fixture(name="hasher")
def hasher_fixture() -> PasswordHasher:
    return PasswordHasher(rounds=4)


class TestPasswordHasher:
    """Tests for hash and verify."""

    @pytest.mark.parametrize("password", ["password123", "pässwörd-ünïcode", " spaces  ", "x" * 72])
    def test_verify_matches_own_hash(self, hasher: PasswordHasher, password: str):
        """A password verifies against its own digest."""
        assert hasher.verify(password, hasher.hash(password))

    def test_verify_rejects_other_password(self, hasher: PasswordHasher):
        """A different password does not verify."""
        digest = hasher.hash("password123")
        assert not hasher.verify("password124", digest)
        assert not hasher.verify("", digest)

    def test_hash_is_salted(self, hasher: PasswordHasher):
        """Hashing the same password twice yields different digests."""
        assert hasher.hash("password123") != hasher.hash("password123")

    def test_hash_does_not_contain_plaintext(self, hasher: PasswordHasher):
        assert "password123" not in hasher.hash("password123")

    def test_work_factor_is_recorded(self):
        """The configured rounds appear in the bcrypt digest."""
        assert PasswordHasher(rounds=5).hash("password123").startswith("$2b$05$")

    def test_verify_malformed_digest_returns_false(self, hasher: PasswordHasher):
        """A corrupt stored digest fails verification instead of raising."""
        assert hasher.verify("password123", "not-a-bcrypt-hash") is False

    def test_password_over_72_bytes_refused(self, hasher: PasswordHasher):
        """bcrypt would silently drop everything past byte 72, so such passwords are not hashed at all."""
        with pytest.raises(ValidationError):
            hasher.hash("a" * 72 + "X")

    def test_multibyte_length_counts_bytes(self, hasher: PasswordHasher):
        """36 two-byte characters fill the limit exactly; one more character goes over it."""
        assert hasher.verify("é" * 36, hasher.hash("é" * 36))
        with pytest.raises(ValidationError):
            hasher.hash("é" * 37)

    def test_long_passwords_with_shared_prefix_not_interchangeable(self, hasher: PasswordHasher):
        """A password extending a stored one past 72 bytes does not verify against it."""
        digest = hasher.hash("a" * 72)
        assert not hasher.verify("a" * 72 + "Y", digest)
        assert not hasher.verify("a" * 72 + "X", digest)
