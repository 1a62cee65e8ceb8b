"""Per-record ownership checks.

Learn: A record that belongs to someone else is reported exactly like a
record that doesn't exist (404), so ids can't be probed to learn what
other users have. Account deletion is the exception: the target is the
caller's own account, so a mismatch is an explicit 403.
"""

from typing import Optional, Protocol, TypeVar

from fastapi import HTTPException

from tasklist.db.models import User

FORBIDDEN_ACCOUNT_MESSAGE = "You can only delete your own account"


class Owned(Protocol):
    user_id: int


R = TypeVar("R", bound=Owned)


def authorize_ownership(user: User, record: Optional[R], resource: str = "Todo") -> R:
    """Return `record` if `user` owns it, else raise 404."""
    if record is None or record.user_id != user.id:
        raise HTTPException(status_code=404, detail=f"{resource} not found")
    return record


def authorize_account_target(user: User, target_id: int) -> None:
    """Only the account holder may act on their own account (403 otherwise)."""
    if user.id != target_id:
        raise HTTPException(status_code=403, detail=FORBIDDEN_ACCOUNT_MESSAGE)
