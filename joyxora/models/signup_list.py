"""Waitlist and funder list models."""

from sqlalchemy import Column, DateTime, Integer, String

from joyxora.clock import utcnow
from joyxora.database import Base


class WaitlistEntry(Base):
    """Someone waiting for launch access."""

    __tablename__ = "waitlist"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(256), nullable=True)
    email = Column(String(256), unique=True, nullable=False, index=True)
    joined_at = Column(DateTime, nullable=False, default=utcnow)


class Funder(Base):
    """Someone who pledged support."""

    __tablename__ = "funder"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(256), nullable=True)
    email = Column(String(256), unique=True, nullable=False, index=True)
    amount = Column(String(64), nullable=True)  # free text as entered, e.g. "$50"
    joined_at = Column(DateTime, nullable=False, default=utcnow)
