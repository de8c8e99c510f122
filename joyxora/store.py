"""Credential persistence over SQLAlchemy.

Every method runs in its own short session taken from the injected
sessionmaker. Uniqueness is enforced by the table constraints, so ``insert``
never checks for an existing row first: it writes and translates the
constraint violation into ``ConflictError``.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from joyxora.errors import ConflictError, ServerError
from joyxora.models.user import User

logger = logging.getLogger("joyxora")

DUPLICATE_USER = "User already exists"


class CredentialStore:
    """Reads and writes user records."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except IntegrityError:
            db.rollback()
            raise
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Store operation %s failed: %s", operation, e)
            raise ServerError("Server error") from e
        finally:
            db.close()

    def find_by_email(self, email: str) -> User | None:
        with self._session("find_by_email") as db:
            return db.scalars(select(User).where(User.email == email)).first()

    def find_by_username(self, username: str) -> User | None:
        with self._session("find_by_username") as db:
            return db.scalars(select(User).where(User.username == username)).first()

    def find_by_id(self, user_id: int) -> User | None:
        with self._session("find_by_id") as db:
            return db.get(User, user_id)

    def find_by_reset_token(self, token: str, now: datetime) -> User | None:
        """Find the user holding ``token``, ignoring tokens that expired at or before ``now``."""
        with self._session("find_by_reset_token") as db:
            return db.scalars(
                select(User).where(User.reset_token == token, User.reset_expires_at > now)
            ).first()

    def insert(self, email: str, username: str, password_hash: str) -> User:
        """Create a user. Raises ConflictError if the email or username is taken."""
        try:
            with self._session("insert") as db:
                user = User(email=email, username=username, password_hash=password_hash)
                db.add(user)
                db.commit()
                db.refresh(user)
                return user
        except IntegrityError:
            logger.info("Insert rejected by uniqueness constraint")
            raise ConflictError(DUPLICATE_USER) from None

    def update_password(self, user_id: int, password_hash: str) -> None:
        with self._session("update_password") as db:
            db.execute(update(User).where(User.id == user_id).values(password_hash=password_hash))
            db.commit()

    def set_reset_token(self, email: str, token: str, expires_at: datetime) -> bool:
        """Store a reset token and its expiry in one statement. Returns False if no user matched."""
        with self._session("set_reset_token") as db:
            result = db.execute(
                update(User).where(User.email == email).values(reset_token=token, reset_expires_at=expires_at)
            )
            db.commit()
            return result.rowcount > 0

    def clear_reset_token(self, user_id: int) -> None:
        with self._session("clear_reset_token") as db:
            db.execute(update(User).where(User.id == user_id).values(reset_token=None, reset_expires_at=None))
            db.commit()

    def reset_password(self, token: str, password_hash: str, now: datetime) -> User | None:
        """Consume a live reset token and set a new password in one transaction.

        The update is conditioned on the token still being present and unexpired,
        so of two concurrent consumers at most one succeeds.
        """
        with self._session("reset_password") as db:
            user = db.scalars(
                select(User).where(User.reset_token == token, User.reset_expires_at > now)
            ).first()
            if user is None:
                return None
            result = db.execute(
                update(User)
                .where(User.id == user.id, User.reset_token == token, User.reset_expires_at > now)
                .values(password_hash=password_hash, reset_token=None, reset_expires_at=None)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                db.rollback()
                return None
            db.commit()
            db.refresh(user)
            return user
