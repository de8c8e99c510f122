"""User model."""

from sqlalchemy import Column, DateTime, Integer, String

from joyxora.clock import utcnow
from joyxora.database import Base


class User(Base):
    """Registered account."""

    __tablename__ = "signup"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(256), unique=True, nullable=False, index=True)
    email = Column(String(256), unique=True, nullable=False, index=True)
    password_hash = Column(String(256), nullable=False)
    reset_token = Column(String(256), nullable=True, index=True)
    reset_expires_at = Column(DateTime, nullable=True)
    joined_at = Column(DateTime, nullable=False, default=utcnow)
