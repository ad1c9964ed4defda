"""Typed failures raised by the core.

Learn: Every core operation either returns a value or raises one of
these. The HTTP layer has a single exception handler (see main.py)
that turns them into {"status": "error", "message": ...} with the
class's status code. Nothing below the routes knows about HTTP.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    UNAUTHENTICATED = "Unauthenticated"
    MISSING_CREDENTIAL = "MissingCredential"
    INVALID_CREDENTIAL = "InvalidCredential"
    INVALID_SIGNATURE = "InvalidSignature"
    EXPIRED = "Expired"
    AUTHENTICATION_FAILED = "AuthenticationFailed"
    FORBIDDEN = "Forbidden"
    NOT_FOUND = "NotFound"
    DUPLICATE_ACCOUNT = "DuplicateAccount"
    DUPLICATE_MAIL = "DuplicateMail"
    INVALID_INPUT = "InvalidInput"
    STORAGE_UNAVAILABLE = "StorageUnavailable"


class UserGateError(Exception):
    """Base class for all core failures."""

    kind: ErrorKind
    status_code: int = 500
    default_message: str = "Internal error"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


# ─── Unauthenticated ────────────────────────────────────


class Unauthenticated(UserGateError):
    kind = ErrorKind.UNAUTHENTICATED
    status_code = 401
    default_message = "Authentication required"


class MissingCredential(Unauthenticated):
    kind = ErrorKind.MISSING_CREDENTIAL
    default_message = "No login credentials provided, please log in again"


class InvalidCredential(Unauthenticated):
    kind = ErrorKind.INVALID_CREDENTIAL
    default_message = "Login session is no longer valid, please log in again"


class TokenError(Unauthenticated):
    """Raised when token verification fails."""


class TokenExpired(TokenError):
    kind = ErrorKind.EXPIRED
    default_message = "Token has expired"


class InvalidSignature(TokenError):
    kind = ErrorKind.INVALID_SIGNATURE
    default_message = "Invalid token"


# ─── Everything else ────────────────────────────────────


class AuthenticationFailed(UserGateError):
    kind = ErrorKind.AUTHENTICATION_FAILED
    status_code = 400
    default_message = "User not found: wrong account or password"


class Forbidden(UserGateError):
    kind = ErrorKind.FORBIDDEN
    status_code = 403
    default_message = "Not allowed to modify this user"


class NotFound(UserGateError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404
    default_message = "User not found"


class DuplicateAccount(UserGateError):
    kind = ErrorKind.DUPLICATE_ACCOUNT
    status_code = 400
    default_message = "Account is already in use"


class DuplicateMail(UserGateError):
    kind = ErrorKind.DUPLICATE_MAIL
    status_code = 400
    default_message = "Mail address is already registered"


class InvalidInput(UserGateError):
    kind = ErrorKind.INVALID_INPUT
    status_code = 400
    default_message = "Invalid input"


class StorageUnavailable(UserGateError):
    kind = ErrorKind.STORAGE_UNAVAILABLE
    status_code = 503
    default_message = "User store is unavailable"
