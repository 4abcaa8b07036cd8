"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers to extract
and validate the current user from the request.

The guard distinguishes two failure modes:
1. No usable "Authorization: Bearer <token>" header → 401 Unauthenticated
2. A token that fails verification (bad signature, expired) → 403 Forbidden
Either way the route handler never runs.
"""

from typing import Optional

import structlog
from fastapi import Header, Request

from pagevault.auth.jwt import TokenError, verify_token
from pagevault.errors import Forbidden, Unauthenticated

logger = structlog.get_logger()


class CurrentIdentity:
    """Represents the authenticated user making the request.

    Learn: Built purely from the verified token claims. The guard does
    not look the user up in the database. All page queries are scoped
    by user_id from here, never by anything in the request body.
    """

    def __init__(self, user_id: int, email: str):
        self.user_id = user_id
        self.email = email

    def __repr__(self) -> str:
        return f"CurrentIdentity(user_id={self.user_id})"


def parse_bearer(authorization: Optional[str]) -> Optional[str]:
    """Return the token from a "Bearer <token>" header value, else None."""
    if not authorization:
        return None
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
        return None
    return parts[1]


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> CurrentIdentity:
    """Extract current identity (required: 401 if no token, 403 if bad)."""
    token = parse_bearer(authorization)
    if token is None:
        raise Unauthenticated()

    try:
        claims = verify_token(token, request.app.state.settings)
    except TokenError as e:
        logger.info("auth.token_rejected", reason=str(e))
        raise Forbidden()

    structlog.contextvars.bind_contextvars(user_id=claims.subject_id)
    return CurrentIdentity(user_id=claims.subject_id, email=claims.email)
