"""Users API — registration and self-service account deletion.

Learn: Routes for the account lifecycle:
- POST /users → create an account, returns the user and a token
- DELETE /users/:id → delete your own account (and all your todos)
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tasklist.auth.dependencies import get_current_user, get_token_service
from tasklist.auth.ownership import authorize_account_target
from tasklist.auth.tokens import TokenService
from tasklist.db.engine import get_db
from tasklist.db.models import User
from tasklist.schemas.user import AuthResponse, MessageResponse, RegisterRequest
from tasklist.services.user_service import UserService

router = APIRouter(prefix="/users")


def _user_svc(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


@router.post("", response_model=AuthResponse, status_code=201)
async def register(
    body: RegisterRequest,
    svc: UserService = Depends(_user_svc),
    tokens: TokenService = Depends(get_token_service),
):
    """Create a new account and sign the user in."""
    user = await svc.register(
        email=body.user.email,
        password=body.user.password,
        password_confirmation=body.user.password_confirmation,
    )
    return {"user": user, "token": tokens.issue(user.id)}


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_account(
    user_id: int,
    user: User = Depends(get_current_user),
    svc: UserService = Depends(_user_svc),
):
    """Delete the caller's own account. Other ids are forbidden."""
    authorize_account_target(user, user_id)
    await svc.delete_account(user)
    return {"message": "Account successfully deleted"}
