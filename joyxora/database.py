"""Database engine and session factory construction."""

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from joyxora.config import Settings


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


def build_engine(settings: Settings) -> Engine:
    """Create the pooled engine for the configured database.

    Waiting for a pooled connection and opening a new one are both bounded by
    DB_TIMEOUT_SECONDS so a saturated or unreachable store surfaces as an error.
    """
    timeout = settings.DB_TIMEOUT_SECONDS
    if settings.DATABASE_URL.startswith("sqlite"):
        return create_engine(
            settings.DATABASE_URL,
            echo=settings.DEBUG,
            connect_args={"check_same_thread": False, "timeout": timeout},
        )
    return create_engine(
        settings.DATABASE_URL,
        echo=settings.DEBUG,
        pool_pre_ping=True,
        pool_timeout=timeout,
        connect_args={"connect_timeout": timeout},
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    """Sessions keep loaded attributes after commit so records can leave the store."""
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
