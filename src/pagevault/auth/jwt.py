"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication.
The access token carries the user id ("sub") and email, plus issued-at
and expiry timestamps. It is signed with settings.jwt_secret (HS256);
anyone who alters the payload invalidates the signature.

There are no refresh tokens and no revocation list; a token is valid
until its exp claim passes.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from pagevault.config import Settings


class TokenError(Exception):
    """Raised when token verification fails."""


class InvalidToken(TokenError):
    """Bad signature, malformed token, or missing/garbled claims."""


class ExpiredToken(TokenError):
    """Signature checks out but the exp claim has passed."""


@dataclass(frozen=True)
class TokenClaims:
    subject_id: int
    email: str
    issued_at: datetime
    expires_at: datetime


def create_access_token(
    user_id: int,
    email: str,
    settings: Settings,
    expires_minutes: Optional[int] = None,
    issued_at: Optional[datetime] = None,
) -> str:
    """Create a signed JWT access token for a user."""
    now = issued_at or datetime.now(timezone.utc)
    if expires_minutes is None:
        expires_minutes = settings.access_token_expire_minutes
    payload = {
        "sub": str(user_id),
        "email": email,
        "iat": now,
        "exp": now + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, settings: Settings) -> TokenClaims:
    """Verify and decode a JWT access token.

    Returns the decoded claims on success.
    Raises ExpiredToken or InvalidToken on failure.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        raise ExpiredToken("Token has expired")
    except jwt.InvalidTokenError as e:
        raise InvalidToken(f"Invalid token: {e}")

    email = payload.get("email")
    if not isinstance(email, str):
        raise InvalidToken("Invalid token: missing email claim")
    try:
        subject_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise InvalidToken("Invalid token: malformed subject")

    return TokenClaims(
        subject_id=subject_id,
        email=email,
        issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )
