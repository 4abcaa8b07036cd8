"""Domain errors and their HTTP mapping.

Learn: Services raise these instead of HTTPException so they stay usable
outside a request (CLI, tests). One exception handler in main.py turns
any PageVaultError into a JSON {"message": ...} body with its status code.

Two errors are deliberately vague:
- InvalidCredentials covers both "unknown email" and "wrong password"
- NotFoundOrForbidden covers both "no such page" and "someone else's page"
so a caller can never probe for accounts or pages they don't own.
"""

from typing import Optional


class PageVaultError(Exception):
    """Base class for errors that map to a client-facing response."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        headers: Optional[dict[str, str]] = None,
    ):
        self.message = message or self.default_message
        self.headers = headers
        super().__init__(self.message)


class ValidationError(PageVaultError):
    """A required field is missing or empty."""

    status_code = 400
    default_message = "Invalid request data"


class DuplicateEmail(PageVaultError):
    status_code = 409
    default_message = "Email already in use."


class InvalidCredentials(PageVaultError):
    status_code = 401
    default_message = "Invalid credentials."


class Unauthenticated(PageVaultError):
    """No bearer token, or the Authorization header is malformed."""

    status_code = 401
    default_message = "Authentication required"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(PageVaultError):
    """A bearer token was presented but is invalid or expired."""

    status_code = 403
    default_message = "Invalid or expired token"


class NotFoundOrForbidden(PageVaultError):
    status_code = 404
    default_message = "Page not found or you don't have permission to access it."


class InternalError(PageVaultError):
    status_code = 500
