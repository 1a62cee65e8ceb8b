"""Signed, expiring identity tokens.

Learn: JWT (JSON Web Token) provides stateless authentication. The token
carries only the user id (`sub`) and an absolute expiry (`exp`, Unix
seconds), signed with HMAC-SHA256. Nothing is stored server-side, so a
token stays usable until it expires; logging out means the client
discards it.

The secret is passed to TokenService explicitly instead of being read
from module globals. Tests build their own service with their own
secret and clock, and rotating the secret is a config change.

verify() never raises. Every failure becomes an InvalidToken whose
`reason` is for server-side logs only; callers must treat all reasons
the same way.
"""

import enum
import time
from dataclasses import dataclass
from typing import Callable, Union

import jwt

DEFAULT_TTL_SECONDS = 24 * 60 * 60


class InvalidReason(str, enum.Enum):
    MALFORMED = "malformed"
    BAD_SIGNATURE = "bad_signature"
    EXPIRED = "expired"


@dataclass(frozen=True)
class TokenPayload:
    """Decoded contents of a valid token."""

    user_id: int
    expires_at: int


@dataclass(frozen=True)
class InvalidToken:
    """Verification failed. `reason` is never shown to clients."""

    reason: InvalidReason


VerifyResult = Union[TokenPayload, InvalidToken]


class TokenService:
    """Issue and verify HMAC-signed identity tokens."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        if not secret:
            raise ValueError("TokenService requires a non-empty signing secret")
        if not algorithm.startswith("HS"):
            raise ValueError(f"Unsupported token algorithm: {algorithm}")
        self._secret = secret
        self.algorithm = algorithm
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    def now(self) -> int:
        return int(self._clock())

    def issue(self, user_id: int) -> str:
        """Create a token for `user_id` that expires `ttl_seconds` from now."""
        return self.encode(user_id, self.now() + self.ttl_seconds)

    def encode(self, user_id: int, expires_at: int) -> str:
        """Create a token with an explicit expiry instant (Unix seconds)."""
        payload = {
            "sub": str(user_id),
            "iat": self.now(),
            "exp": int(expires_at),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> VerifyResult:
        """Check signature and expiry.

        Returns TokenPayload on success, InvalidToken otherwise. The
        expiry must be strictly after the current second.
        """
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                # Expiry is checked below against our own clock.
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": ["sub", "exp"],
                },
            )
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError):
            return InvalidToken(InvalidReason.BAD_SIGNATURE)
        except jwt.InvalidTokenError:
            return InvalidToken(InvalidReason.MALFORMED)

        exp = claims["exp"]
        if isinstance(exp, bool) or not isinstance(exp, int):
            return InvalidToken(InvalidReason.MALFORMED)
        try:
            user_id = int(claims["sub"])
        except (TypeError, ValueError):
            return InvalidToken(InvalidReason.MALFORMED)

        if exp <= self.now():
            return InvalidToken(InvalidReason.EXPIRED)

        return TokenPayload(user_id=user_id, expires_at=exp)
