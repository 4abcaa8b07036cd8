"""Auth API — registration, login, current identity.

Learn: Routes for user authentication:
- POST /register → create a new user account
- POST /login → email/password → JWT access token
- GET /me → identity claims from the bearer token

Logout has no endpoint: tokens aren't stored server-side, so the client
simply discards its token.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from pagevault.auth.dependencies import CurrentIdentity, get_current_user
from pagevault.auth.jwt import create_access_token
from pagevault.db.engine import get_db
from pagevault.schemas.auth import (
    LoginRequest,
    MeResponse,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
)
from pagevault.services.user_service import UserService

router = APIRouter()


def _svc(request: Request, db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db, bcrypt_rounds=request.app.state.settings.bcrypt_rounds)


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(body: RegisterRequest, svc: UserService = Depends(_svc)):
    """Create a new user account."""
    user = await svc.register(body.email, body.password)
    return RegisterResponse(message="User created successfully.", user_id=user.id)


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    request: Request,
    svc: UserService = Depends(_svc),
):
    """Login with email and password → JWT access token."""
    user = await svc.verify_credentials(body.email, body.password)
    token = create_access_token(user.id, user.email, request.app.state.settings)
    return TokenResponse(access_token=token)


@router.get("/me", response_model=MeResponse)
async def get_me(identity: CurrentIdentity = Depends(get_current_user)):
    """Return the identity carried by the bearer token."""
    return MeResponse(id=identity.user_id, email=identity.email)
