"""Password hashing and credential rules.

Learn: Uses bcrypt for secure password hashing. bcrypt automatically
handles salting and is resistant to rainbow table attacks.
Passwords are truncated to 72 bytes (bcrypt's limit) on both the hash
and verify paths so long passwords still round-trip.

The credential rules live here too, so every write path (registration,
profile update) applies the same checks.
"""

import bcrypt
from email_validator import EmailNotValidError, validate_email

MIN_PASSWORD_LENGTH = 8
PASSWORD_SPECIAL_CHARS = "@$!%*?&"

COMPLEXITY_MESSAGE = (
    "must include at least one lowercase letter, one uppercase letter, "
    "one digit, and one special character"
)


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash a password with bcrypt (salt included in the result)."""
    pw_bytes = password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash. Never raises."""
    try:
        pw_bytes = password.encode("utf-8")[:72]
        hash_bytes = password_hash.encode("utf-8")
        return bcrypt.checkpw(pw_bytes, hash_bytes)
    except (ValueError, TypeError):
        return False


def normalize_email(email: str) -> str:
    return email.strip().lower()


def email_problems(email: str) -> list[str]:
    """Return validation messages for an (already normalized) email."""
    if not email:
        return ["can't be blank"]
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return ["is invalid"]
    return []


def password_problems(password: str) -> list[str]:
    """Return validation messages for a candidate password.

    Rules: at least 8 characters, with one lowercase letter, one uppercase
    letter, one digit and one of @$!%*?&.
    """
    if not password:
        return ["can't be blank"]

    problems = []
    if len(password) < MIN_PASSWORD_LENGTH:
        problems.append(
            f"is too short (minimum is {MIN_PASSWORD_LENGTH} characters)"
        )
    has_lower = any(c.islower() for c in password)
    has_upper = any(c.isupper() for c in password)
    has_digit = any(c.isdigit() for c in password)
    has_special = any(c in PASSWORD_SPECIAL_CHARS for c in password)
    if not (has_lower and has_upper and has_digit and has_special):
        problems.append(COMPLEXITY_MESSAGE)
    return problems
