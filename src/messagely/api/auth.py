"""Auth API: registration and login.

Routes:
- POST /auth/register → create account, log in, return {token}
- POST /auth/login    → username/password → {token}

A token is only ever issued after the password has been checked (or the
account just created), and last_login_at is stamped exactly once per
successful login or registration.
"""

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from messagely.auth.dependencies import get_password_hasher, get_session_issuer
from messagely.auth.jwt import SessionIssuer
from messagely.auth.password import PasswordHasher
from messagely.db.engine import get_db
from messagely.errors import UnauthorizedError
from messagely.schemas.user import LoginRequest, RegisterRequest, TokenResponse
from messagely.services.user_service import UserService

logger = structlog.get_logger()

router = APIRouter(prefix="/auth")


def _svc(
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> UserService:
    return UserService(db, hasher)


@router.post("/register", response_model=TokenResponse)
async def register(
    body: RegisterRequest,
    svc: UserService = Depends(_svc),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    """Create a new user account and return a token for it."""
    user = await svc.register(
        username=body.username,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
        phone=body.phone,
    )
    await svc.record_login(user.username)
    return TokenResponse(token=issuer.issue(user.username))


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    svc: UserService = Depends(_svc),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    """Login with username and password → token."""
    if not await svc.authenticate(body.username, body.password):
        logger.info("auth.login_failed", username=body.username)
        raise UnauthorizedError("Invalid username/password")

    await svc.record_login(body.username)
    logger.info("auth.login_succeeded", username=body.username)
    return TokenResponse(token=issuer.issue(body.username))
