"""Authentication API endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from joyxora.dependencies import get_credential_service, get_current_identity
from joyxora.errors import AuthError
from joyxora.schemas.auth import (
    AuthResponse,
    ConsumeResetRequest,
    CredentialsRequest,
    MessageResponse,
    RequestResetRequest,
    SelfResponse,
    UserResponse,
)
from joyxora.services.auth import CredentialService
from joyxora.services.jwt import TokenClaims

router = APIRouter(tags=["Authentication"])

RESET_ACKNOWLEDGEMENT = "If that email exists, we sent a reset link."


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(
    body: CredentialsRequest,
    service: CredentialService = Depends(get_credential_service),
) -> AuthResponse:
    """Register a new account and return a bearer token."""
    result = service.register(body.email, body.password)
    return AuthResponse(
        message="Account created successfully",
        token=result.token,
        user=UserResponse.from_user(result.user),
    )


@router.post("/authenticate", response_model=AuthResponse)
def authenticate(
    body: CredentialsRequest,
    service: CredentialService = Depends(get_credential_service),
) -> AuthResponse:
    """Authenticate and receive a bearer token."""
    result = service.authenticate(body.email, body.password)
    return AuthResponse(
        message="Sign in successful",
        token=result.token,
        user=UserResponse.from_user(result.user),
    )


@router.post("/request-reset", response_model=MessageResponse)
def request_reset(
    body: RequestResetRequest,
    service: CredentialService = Depends(get_credential_service),
) -> MessageResponse:
    """Request a password reset email. The response never reveals whether the account exists."""
    service.request_reset(body.email)
    return MessageResponse(message=RESET_ACKNOWLEDGEMENT)


@router.post("/consume-reset", response_model=MessageResponse)
def consume_reset(
    body: ConsumeResetRequest,
    service: CredentialService = Depends(get_credential_service),
) -> MessageResponse:
    """Set a new password with a reset token."""
    try:
        service.consume_reset(body.token, body.new_password)
    except AuthError as e:
        # a bad reset token is a client input error here, not an authentication failure
        raise HTTPException(status_code=400, detail=e.message) from None
    return MessageResponse(message="Password reset successfully! You can now sign in.")


@router.get("/self", response_model=SelfResponse)
def read_self(
    identity: TokenClaims = Depends(get_current_identity),
    service: CredentialService = Depends(get_credential_service),
) -> SelfResponse:
    """Return the account behind the bearer token."""
    user = service.read_self(identity)
    return SelfResponse(user=UserResponse.from_user(user))
