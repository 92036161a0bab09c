"""FastAPI auth dependencies.

These are used as Depends() in route handlers to build the configured
hasher / token issuer and to resolve the requesting username.

The token is taken from `Authorization: Bearer <token>`, or from a
`_token` query parameter for clients that can't set headers.
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, Query

from messagely.auth.jwt import SessionIssuer
from messagely.auth.password import PasswordHasher
from messagely.config import settings
from messagely.errors import UnauthorizedError


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=settings.bcrypt_work_factor)


@lru_cache
def get_session_issuer() -> SessionIssuer:
    return SessionIssuer(secret=settings.jwt_secret, algorithm=settings.jwt_algorithm)


def _extract_token(authorization: Optional[str], query_token: Optional[str]) -> Optional[str]:
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
        return None
    return query_token or None


async def get_current_user_optional(
    authorization: Optional[str] = Header(None),
    token: Optional[str] = Query(None, alias="_token"),
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> Optional[str]:
    """Resolve the requesting username, or None if no token was sent.

    A token that IS sent but doesn't verify is still a 401; only a
    completely anonymous request gets None.
    """
    if not authorization and not token:
        return None
    return issuer.verify(_extract_token(authorization, token))


async def get_current_user(
    username: Optional[str] = Depends(get_current_user_optional),
) -> str:
    """Resolve the requesting username (required, 401 if no auth)."""
    if not username:
        raise UnauthorizedError()
    return username
