"""Pydantic schemas for accounts and sessions.

Learn: Request bodies use the `{"user": {...}}` envelope the front end
sends. Field rules (email format, password complexity) are enforced by
the user service, not here, so every write path reports them the same way.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class Credentials(BaseModel):
    email: str
    password: str
    password_confirmation: Optional[str] = None


class RegisterRequest(BaseModel):
    user: Credentials


class LoginRequest(BaseModel):
    # Missing fields fall through to the generic credentials failure.
    email: str = ""
    password: str = ""


class ProfileFields(BaseModel):
    email: str


class ProfileUpdate(BaseModel):
    user: ProfileFields


class UserRead(BaseModel):
    id: int
    email: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    """Returned by registration and login: the user plus a bearer token."""
    user: UserRead
    token: str


class MessageResponse(BaseModel):
    message: str
