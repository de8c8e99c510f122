"""Pytest configuration and fixtures."""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from joyxora.clock import utcnow
from joyxora.config import Settings
from joyxora.database import Base, build_session_factory
from joyxora.models.signup_list import Funder, WaitlistEntry  # noqa: F401
from joyxora.models.user import User  # noqa: F401
from joyxora.services.auth import CredentialService
from joyxora.services.jwt import TokenIssuer
from joyxora.services.notifier import NotificationDispatcher
from joyxora.services.passwords import PasswordHasher
from joyxora.services.reset_tokens import ResetTokenManager
from joyxora.store import CredentialStore

TEST_SECRET = "test-secret-key"


class RecordingNotifier:
    """Notifier that remembers what it was asked to send."""

    def __init__(self) -> None:
        self.welcomes: list[tuple[str, str]] = []
        self.resets: list[tuple[str, str, str]] = []

    def send_welcome(self, email: str, username: str) -> None:
        self.welcomes.append((email, username))

    def send_reset_link(self, email: str, username: str, token: str) -> None:
        self.resets.append((email, username, token))


class FixedClock:
    """Clock the tests can move forward by hand."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture(name="settings")
def settings_fixture() -> Settings:
    settings = Settings()
    settings.JWT_SECRET_KEY = TEST_SECRET
    settings.BCRYPT_ROUNDS = 4
    settings.EMAIL_USER = ""
    settings.EMAIL_PASS = ""
    return settings


@pytest.fixture(name="session_factory")
def session_factory_fixture() -> sessionmaker:
    """Create an in-memory SQLite database for tests."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield build_session_factory(engine)
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(name="store")
def store_fixture(session_factory: sessionmaker) -> CredentialStore:
    return CredentialStore(session_factory)


@pytest.fixture(name="notifier")
def notifier_fixture() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture(name="dispatcher")
def dispatcher_fixture(notifier: RecordingNotifier):
    dispatcher = NotificationDispatcher(notifier, max_workers=1)
    yield dispatcher
    dispatcher.shutdown()


@pytest.fixture(name="token_issuer")
def token_issuer_fixture() -> TokenIssuer:
    return TokenIssuer(TEST_SECRET)


@pytest.fixture(name="clock")
def clock_fixture() -> FixedClock:
    return FixedClock(utcnow().replace(microsecond=0))


@pytest.fixture(name="service")
def service_fixture(
    store: CredentialStore,
    token_issuer: TokenIssuer,
    dispatcher: NotificationDispatcher,
    clock: FixedClock,
) -> CredentialService:
    return CredentialService(
        store=store,
        hasher=PasswordHasher(rounds=4),
        token_issuer=token_issuer,
        reset_tokens=ResetTokenManager(60),
        dispatcher=dispatcher,
        clock=clock,
    )


@pytest.fixture(name="client")
def client_fixture(settings: Settings, session_factory: sessionmaker, notifier: RecordingNotifier):
    """Create a test client wired to the in-memory database and recording notifier."""
    from main import create_app

    app = create_app(settings=settings, session_factory=session_factory, notifier=notifier)
    with TestClient(app) as c:
        yield c


@pytest.fixture(name="test_user")
def test_user_fixture(client: TestClient) -> dict:
    """Register a user through the API and return its credentials and token."""
    response = client.post("/register", json={"email": "test@example.com", "password": "password123"})
    assert response.status_code == 201
    data = response.json()
    return {
        "id": data["user"]["id"],
        "email": "test@example.com",
        "password": "password123",
        "username": "test",
        "token": data["token"],
    }
