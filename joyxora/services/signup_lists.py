"""Waitlist and funder collection."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from joyxora.errors import ConflictError, ServerError, ValidationError
from joyxora.models.signup_list import Funder, WaitlistEntry

logger = logging.getLogger("joyxora")


class SignupListService:
    """Collects launch waitlist entries and funder pledges."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def _add(self, entry: WaitlistEntry | Funder, duplicate_message: str) -> None:
        if not entry.email:
            raise ValidationError("Email is required")
        with self._session_factory() as db:
            db.add(entry)
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                raise ConflictError(duplicate_message) from None
            except SQLAlchemyError as e:
                db.rollback()
                logger.error("Failed to save %s: %s", type(entry).__name__, e)
                raise ServerError("Database error") from e

    def _list(self, model: type[WaitlistEntry] | type[Funder]) -> list:
        try:
            with self._session_factory() as db:
                return list(db.scalars(select(model).order_by(model.joined_at.desc(), model.id.desc())))
        except SQLAlchemyError as e:
            logger.error("Failed to fetch %s rows: %s", model.__tablename__, e)
            raise ServerError(f"Error fetching {model.__tablename__} data") from e

    def join_waitlist(self, name: str | None, email: str | None) -> None:
        self._add(WaitlistEntry(name=name or None, email=email), "Already on the waitlist")

    def list_waitlist(self) -> list[WaitlistEntry]:
        return self._list(WaitlistEntry)

    def add_funder(self, name: str | None, email: str | None, amount: str | None) -> None:
        self._add(Funder(name=name or None, email=email, amount=amount or None), "Already registered as a funder")

    def list_funders(self) -> list[Funder]:
        return self._list(Funder)
