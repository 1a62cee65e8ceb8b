"""User service — the credential store.

Learn: Owns every rule about accounts: emails are normalized to
lowercase before any lookup or write, so uniqueness is case-insensitive;
passwords must pass the complexity rules and are only stored hashed.
Validation happens before anything is written, so a rejected request
leaves no partial state behind.

Account deletion removes the user's todos and the user in one
transaction. If any step fails, the whole thing rolls back.
"""

import secrets
from functools import lru_cache
from typing import Optional

import structlog
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tasklist.auth.password import (
    email_problems,
    hash_password,
    normalize_email,
    password_problems,
    verify_password,
)
from tasklist.config import settings
from tasklist.db.models import Todo, User
from tasklist.errors import AccountDeletionError, CredentialError

logger = structlog.get_logger()

EMAIL_TAKEN = "has already been taken"


@lru_cache(maxsize=1)
def _placeholder_hash() -> str:
    return hash_password(secrets.token_urlsafe(16), rounds=settings.bcrypt_rounds)


class UserService:
    """Registration, login, profile updates and account deletion."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Lookup ──────────────────────────────────────────

    async def get_by_email(self, email: str) -> Optional[User]:
        q = select(User).where(User.email == normalize_email(email))
        result = await self.db.execute(q)
        return result.scalars().first()

    async def _email_errors(self, email: str, exclude_id: Optional[int] = None) -> list[str]:
        problems = email_problems(email)
        if problems:
            return problems
        q = select(func.count()).select_from(User).where(User.email == email)
        if exclude_id is not None:
            q = q.where(User.id != exclude_id)
        taken = (await self.db.execute(q)).scalar_one()
        return [EMAIL_TAKEN] if taken else []

    # ─── Register ────────────────────────────────────────

    async def register(
        self,
        email: str,
        password: str,
        password_confirmation: Optional[str] = None,
    ) -> User:
        """Create a new account. Raises CredentialError with field errors."""
        email = normalize_email(email)
        errors: dict[str, list[str]] = {}

        email_errors = await self._email_errors(email)
        if email_errors:
            errors["email"] = email_errors
        pw_errors = password_problems(password)
        if pw_errors:
            errors["password"] = pw_errors
        if password_confirmation is not None and password_confirmation != password:
            errors["password_confirmation"] = ["doesn't match Password"]
        if errors:
            raise CredentialError(errors)

        user = User(
            email=email,
            password_hash=hash_password(password, rounds=settings.bcrypt_rounds),
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email.
            await self.db.rollback()
            raise CredentialError({"email": [EMAIL_TAKEN]})
        await self.db.refresh(user)
        logger.info("user.registered", user_id=user.id)
        return user

    # ─── Login ───────────────────────────────────────────

    async def authenticate(self, email: str, password: str) -> Optional[User]:
        """Return the user for a valid email/password pair, else None."""
        user = await self.get_by_email(email)
        if user is None:
            # Unknown emails cost the same bcrypt check as known ones.
            verify_password(password, _placeholder_hash())
            return None
        if not verify_password(password, user.password_hash):
            return None
        return user

    # ─── Profile ─────────────────────────────────────────

    async def update_profile(self, user: User, email: str) -> User:
        """Change the account email (same rules as registration)."""
        email = normalize_email(email)
        if email != user.email:
            email_errors = await self._email_errors(email, exclude_id=user.id)
            if email_errors:
                raise CredentialError({"email": email_errors})
            user.email = email
            try:
                await self.db.commit()
            except IntegrityError:
                await self.db.rollback()
                raise CredentialError({"email": [EMAIL_TAKEN]})
            await self.db.refresh(user)
        return user

    # ─── Delete ──────────────────────────────────────────

    async def delete_account(self, user: User) -> int:
        """Delete the user and all their todos atomically.

        Returns the number of todos removed. Raises AccountDeletionError
        (after rolling back) if any step fails.
        """
        user_id = user.id
        try:
            result = await self.db.execute(
                delete(Todo).where(Todo.user_id == user_id)
            )
            await self.db.delete(user)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            raise AccountDeletionError(f"user {user_id}: {e}") from e

        logger.info("user.deleted", user_id=user_id, todos_deleted=result.rowcount)
        return result.rowcount
