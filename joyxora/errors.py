"""Error taxonomy shared by the store, the services and the HTTP layer."""


class JoyxoraError(Exception):
    """Base class for classified failures. The message is safe to show to clients."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(JoyxoraError):
    """Missing, malformed or too-short input."""

    status_code = 400


class ConflictError(JoyxoraError):
    """A uniqueness constraint rejected the write."""

    status_code = 400


class AuthError(JoyxoraError):
    """Bad credentials, or a bearer/reset token that is missing, invalid or expired."""

    status_code = 401


class NotFoundError(JoyxoraError):
    status_code = 404


class ServerError(JoyxoraError):
    """Unexpected store or hashing failure. The cause is logged, never returned."""

    status_code = 500
