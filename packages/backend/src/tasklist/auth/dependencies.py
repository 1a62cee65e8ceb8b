"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers to extract
and validate the current user from the request.

get_current_user_optional is the "soft" dependency (None when not
authenticated); get_current_user is the guard, so the handler never runs
for an unauthenticated request.
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tasklist.auth.identity import resolve
from tasklist.auth.tokens import TokenService
from tasklist.config import settings
from tasklist.db.engine import get_db
from tasklist.db.models import User

UNAUTHORIZED = "Unauthorized"


@lru_cache
def get_token_service() -> TokenService:
    """Process-wide token service built from settings."""
    return TokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl_seconds=settings.token_ttl_seconds,
    )


async def get_current_user_optional(
    request: Request,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> Optional[User]:
    """Resolve the current user (returns None if not authenticated)."""
    user = await resolve(request, db, tokens)
    request.state.current_user = user
    return user


async def get_current_user(
    user: Optional[User] = Depends(get_current_user_optional),
) -> User:
    """Require an authenticated user (401 otherwise)."""
    if user is None:
        raise HTTPException(
            status_code=401,
            detail=UNAUTHORIZED,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
