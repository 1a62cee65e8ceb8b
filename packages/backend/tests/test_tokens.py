"""Token service tests — issue/verify, tampering, expiry."""

import jwt
import pytest

from tasklist.auth.tokens import (
    DEFAULT_TTL_SECONDS,
    InvalidReason,
    InvalidToken,
    TokenPayload,
    TokenService,
)

SECRET = "unit-test-secret-0123456789abcdef0123456789"
NOW = 1_700_000_000


@pytest.fixture()
def svc():
    return TokenService(SECRET, clock=lambda: NOW)


def _flip_first_signature_char(token: str) -> str:
    header, payload, sig = token.split(".")
    replacement = "A" if sig[0] != "A" else "B"
    return ".".join([header, payload, replacement + sig[1:]])


# ═══════════════════════════════════════════════════════════
# Round trip
# ═══════════════════════════════════════════════════════════


@pytest.mark.parametrize("user_id", [1, 42, 987654321])
def test_issue_then_verify_returns_same_user(svc, user_id):
    result = svc.verify(svc.issue(user_id))
    assert isinstance(result, TokenPayload)
    assert result.user_id == user_id


def test_issue_sets_24h_expiry(svc):
    result = svc.verify(svc.issue(7))
    assert DEFAULT_TTL_SECONDS == 24 * 60 * 60
    assert result.expires_at == NOW + DEFAULT_TTL_SECONDS


def test_token_is_hs256_with_sub_and_exp(svc):
    token = svc.issue(5)
    assert jwt.get_unverified_header(token)["alg"] == "HS256"
    claims = jwt.decode(token, options={"verify_signature": False})
    assert claims["sub"] == "5"
    assert claims["exp"] == NOW + DEFAULT_TTL_SECONDS


# ═══════════════════════════════════════════════════════════
# Tampering
# ═══════════════════════════════════════════════════════════


def test_mutated_signature_fails(svc):
    token = svc.issue(1)
    result = svc.verify(_flip_first_signature_char(token))
    assert result == InvalidToken(InvalidReason.BAD_SIGNATURE)


def test_other_secret_fails(svc):
    other = TokenService("another-secret-0123456789abcdef0123456789", clock=lambda: NOW)
    result = svc.verify(other.issue(1))
    assert isinstance(result, InvalidToken)
    assert result.reason is InvalidReason.BAD_SIGNATURE


def test_payload_swap_fails(svc):
    """Re-using a signature with a different payload is rejected."""
    header, _, sig = svc.issue(1).split(".")
    _, forged_payload, _ = svc.issue(2).split(".")
    result = svc.verify(".".join([header, forged_payload, sig]))
    assert isinstance(result, InvalidToken)


def test_different_algorithm_fails(svc):
    token = jwt.encode({"sub": "1", "exp": NOW + 60}, SECRET, algorithm="HS512")
    assert svc.verify(token) == InvalidToken(InvalidReason.BAD_SIGNATURE)


def test_unsigned_token_fails(svc):
    token = jwt.encode({"sub": "1", "exp": NOW + 60}, None, algorithm="none")
    assert isinstance(svc.verify(token), InvalidToken)


@pytest.mark.parametrize("garbage", ["", "abc", "invalid.token.format", "a.b", "...."])
def test_malformed_tokens_fail(svc, garbage):
    assert svc.verify(garbage) == InvalidToken(InvalidReason.MALFORMED)


def test_missing_exp_fails(svc):
    token = jwt.encode({"sub": "1"}, SECRET, algorithm="HS256")
    assert svc.verify(token) == InvalidToken(InvalidReason.MALFORMED)


def test_non_numeric_subject_fails(svc):
    token = jwt.encode({"sub": "alice", "exp": NOW + 60}, SECRET, algorithm="HS256")
    assert svc.verify(token) == InvalidToken(InvalidReason.MALFORMED)


# ═══════════════════════════════════════════════════════════
# Expiry
# ═══════════════════════════════════════════════════════════


def test_past_expiry_fails_even_with_valid_signature(svc):
    token = svc.encode(1, NOW - 3600)
    assert svc.verify(token) == InvalidToken(InvalidReason.EXPIRED)


def test_expiry_equal_to_now_fails(svc):
    """Expiry must be strictly in the future."""
    assert svc.verify(svc.encode(1, NOW)) == InvalidToken(InvalidReason.EXPIRED)


def test_expiry_one_second_ahead_passes(svc):
    assert svc.verify(svc.encode(1, NOW + 1)) == TokenPayload(user_id=1, expires_at=NOW + 1)


def test_token_expires_after_ttl():
    clock = {"now": NOW}
    svc = TokenService(SECRET, clock=lambda: clock["now"])
    token = svc.issue(3)

    clock["now"] = NOW + DEFAULT_TTL_SECONDS - 1
    assert isinstance(svc.verify(token), TokenPayload)

    clock["now"] = NOW + DEFAULT_TTL_SECONDS
    assert svc.verify(token) == InvalidToken(InvalidReason.EXPIRED)


# ═══════════════════════════════════════════════════════════
# Construction
# ═══════════════════════════════════════════════════════════


@pytest.mark.parametrize("secret", ["", None])
def test_empty_secret_rejected(secret):
    with pytest.raises(ValueError):
        TokenService(secret)


def test_non_hmac_algorithm_rejected():
    with pytest.raises(ValueError):
        TokenService(SECRET, algorithm="RS256")
