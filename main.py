"""Joyxora - account registration, sign-in and password recovery API."""

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import sessionmaker
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from joyxora.config import Settings, get_settings
from joyxora.database import build_engine, build_session_factory
from joyxora.errors import JoyxoraError
from joyxora.routers import auth_router, signup_lists_router
from joyxora.services.auth import CredentialService
from joyxora.services.jwt import TokenIssuer
from joyxora.services.notifier import LoggingNotifier, NotificationDispatcher, Notifier, SmtpNotifier
from joyxora.services.passwords import PasswordHasher
from joyxora.services.reset_tokens import ResetTokenManager
from joyxora.services.signup_lists import SignupListService
from joyxora.store import CredentialStore

APP_VERSION = "0.1.0"

# Logging
logger = logging.getLogger("joyxora")


# --- Security headers middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "no-referrer"
        response.headers["Cache-Control"] = "no-store"
        return response


# --- Audit logging middleware ---
class AuditLogMiddleware(BaseHTTPMiddleware):
    AUDIT_PATHS = {"/register", "/authenticate", "/request-reset", "/consume-reset"}

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start) * 1000

        # Log credential operations, never their bodies
        if request.method == "POST" and request.url.path in self.AUDIT_PATHS:
            logger.info(
                "AUDIT %s %s -> %d (%.0fms) from %s",
                request.method,
                request.url.path,
                response.status_code,
                duration_ms,
                request.client.host if request.client else "unknown",
            )

        return response


def build_notifier(settings: Settings) -> Notifier:
    if settings.smtp_configured:
        return SmtpNotifier(settings)
    return LoggingNotifier(settings.FRONTEND_URL)


def create_app(
    settings: Settings | None = None,
    session_factory: sessionmaker | None = None,
    notifier: Notifier | None = None,
) -> FastAPI:
    """Build the application and its collaborators.

    Every service is constructed here once and reached by handlers through
    ``app.state``; tests pass their own session factory and notifier.
    """
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    for warning in settings.validate():
        logger.warning(warning)

    engine = None
    if session_factory is None:
        engine = build_engine(settings)
        session_factory = build_session_factory(engine)

    dispatcher = NotificationDispatcher(notifier or build_notifier(settings), max_workers=settings.NOTIFIER_WORKERS)
    token_issuer = TokenIssuer(settings.JWT_SECRET_KEY, settings.JWT_ALGORITHM, settings.JWT_EXPIRE_MINUTES)
    credential_service = CredentialService(
        store=CredentialStore(session_factory),
        hasher=PasswordHasher(rounds=settings.BCRYPT_ROUNDS),
        token_issuer=token_issuer,
        reset_tokens=ResetTokenManager(settings.RESET_TOKEN_EXPIRE_MINUTES),
        dispatcher=dispatcher,
        min_password_length=settings.PASSWORD_MIN_LENGTH,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        dispatcher.shutdown()
        if engine is not None:
            engine.dispose()

    app = FastAPI(title="Joyxora", version=APP_VERSION, lifespan=lifespan)
    app.state.settings = settings
    app.state.token_issuer = token_issuer
    app.state.dispatcher = dispatcher
    app.state.credential_service = credential_service
    app.state.signup_list_service = SignupListService(session_factory)

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(AuditLogMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router)
    app.include_router(signup_lists_router)

    @app.exception_handler(JoyxoraError)
    async def joyxora_error_handler(request: Request, exc: JoyxoraError) -> JSONResponse:
        """Render classified failures with their status code."""
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": "Invalid request body"})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"detail": "Server error"})

    # --- Health check ---
    @app.get("/health")
    def health_check() -> dict:
        """Health check endpoint."""
        return {"status": "ok", "app": "joyxora", "version": APP_VERSION}

    return app


app = create_app()
