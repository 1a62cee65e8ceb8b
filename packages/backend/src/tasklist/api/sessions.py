"""Sessions API — login and logout.

Learn: Tokens are stateless, so logout has nothing to revoke on the
server. The client discards its token; it stops working at its expiry.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from tasklist.auth.dependencies import get_token_service
from tasklist.auth.tokens import TokenService
from tasklist.db.engine import get_db
from tasklist.schemas.user import AuthResponse, LoginRequest, MessageResponse
from tasklist.services.user_service import UserService

logger = structlog.get_logger()

router = APIRouter()

INVALID_CREDENTIALS = "Invalid email or password"


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    """Email + password → user and bearer token."""
    user = await UserService(db).authenticate(body.email, body.password)
    if user is None:
        logger.info("auth.login_failed")
        raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS)

    logger.info("auth.login", user_id=user.id)
    return {"user": user, "token": tokens.issue(user.id)}


@router.delete("/logout", response_model=MessageResponse)
async def logout():
    """Stateless logout: the client drops its token."""
    return {"message": "Logged out successfully"}
