"""Profile API — the authenticated user's own account."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tasklist.auth.dependencies import get_current_user
from tasklist.db.engine import get_db
from tasklist.db.models import User
from tasklist.schemas.user import ProfileUpdate, UserRead
from tasklist.services.user_service import UserService

router = APIRouter(prefix="/profile")


@router.get("", response_model=UserRead)
async def get_profile(user: User = Depends(get_current_user)):
    return user


@router.patch("", response_model=UserRead)
async def update_profile(
    body: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Change the account email."""
    return await UserService(db).update_profile(user, body.user.email)
