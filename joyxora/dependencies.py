"""FastAPI dependencies: injected services and bearer-token authentication."""

from fastapi import Depends, Request

from joyxora.errors import AuthError
from joyxora.services.auth import CredentialService
from joyxora.services.jwt import INVALID_TOKEN, TokenClaims, TokenIssuer
from joyxora.services.signup_lists import SignupListService


def get_credential_service(request: Request) -> CredentialService:
    return request.app.state.credential_service


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_signup_list_service(request: Request) -> SignupListService:
    return request.app.state.signup_list_service


def get_current_identity(
    request: Request,
    token_issuer: TokenIssuer = Depends(get_token_issuer),
) -> TokenClaims:
    """Validate the Bearer token and attach the identity to the request. Raises AuthError (401)."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise AuthError("missing token")

    scheme, _, token = auth_header.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise AuthError(INVALID_TOKEN)

    identity = token_issuer.verify(token)
    request.state.identity = identity
    return identity
