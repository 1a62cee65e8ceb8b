"""Identity resolution — request headers to a concrete user.

Learn: Every way authentication can fail (no header, wrong scheme,
garbled token, bad signature, expired token, user deleted since the
token was issued) collapses to "no identity" for the caller. The
specific AuthFailure is kept on the Resolution and logged, but it is
never put in a response. Clients can't tell *why* they were rejected.
"""

import enum
from dataclasses import dataclass
from typing import Mapping, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from tasklist.auth.tokens import InvalidReason, InvalidToken, TokenService
from tasklist.db.models import User

logger = structlog.get_logger()

AUTHORIZATION_HEADER = "Authorization"
BEARER_PREFIX = "Bearer "

_STATE_KEY = "identity"


class AuthFailure(str, enum.Enum):
    MISSING_CREDENTIALS = "missing_credentials"
    MALFORMED_TOKEN = "malformed_token"
    BAD_SIGNATURE = "bad_signature"
    EXPIRED_TOKEN = "expired_token"
    UNKNOWN_USER = "unknown_user"


_TOKEN_FAILURES = {
    InvalidReason.MALFORMED: AuthFailure.MALFORMED_TOKEN,
    InvalidReason.BAD_SIGNATURE: AuthFailure.BAD_SIGNATURE,
    InvalidReason.EXPIRED: AuthFailure.EXPIRED_TOKEN,
}


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a request: a user, or a failure kind."""

    user: Optional[User] = None
    failure: Optional[AuthFailure] = None

    @property
    def authenticated(self) -> bool:
        return self.user is not None


def extract_token(headers: Mapping[str, str]) -> Optional[str]:
    """Return the bearer token from an Authorization header, if any.

    The value must start with "Bearer " (trailing space included). A bare
    "Bearer", other schemes such as "Basic", and "Bearer " with nothing
    after it all yield None.
    """
    value = headers.get(AUTHORIZATION_HEADER)
    if not value or not value.startswith(BEARER_PREFIX):
        return None
    token = value[len(BEARER_PREFIX):]
    return token or None


async def resolve_identity(
    headers: Mapping[str, str],
    db: AsyncSession,
    tokens: TokenService,
) -> Resolution:
    """Resolve headers to a user without raising on auth failures."""
    token = extract_token(headers)
    if token is None:
        return Resolution(failure=AuthFailure.MISSING_CREDENTIALS)

    result = tokens.verify(token)
    if isinstance(result, InvalidToken):
        return Resolution(failure=_TOKEN_FAILURES[result.reason])

    user = await db.get(User, result.user_id)
    if user is None:
        return Resolution(failure=AuthFailure.UNKNOWN_USER)
    return Resolution(user=user)


async def resolve(
    request: Request,
    db: AsyncSession,
    tokens: TokenService,
) -> Optional[User]:
    """Resolve the request's user, computing it at most once per request."""
    cached = getattr(request.state, _STATE_KEY, None)
    if cached is None:
        cached = await resolve_identity(request.headers, db, tokens)
        setattr(request.state, _STATE_KEY, cached)
        if cached.failure is not None:
            logger.info(
                "auth.rejected",
                reason=cached.failure.value,
                path=request.url.path,
            )
    return cached.user
