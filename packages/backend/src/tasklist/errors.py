"""Error types and response rendering.

Learn: All HTTP errors leave the app as {"error": "<message>"}; validation
failures as {"errors": {"<field>": ["<message>", ...]}} with status 422.
Handlers raise HTTPException as usual and the shape is applied here once.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger()


class CredentialError(Exception):
    """Raised when user data breaks a credential rule. Carries field errors."""

    def __init__(self, errors: dict[str, list[str]]):
        super().__init__("; ".join(f"{k} {', '.join(v)}" for k, v in errors.items()))
        self.errors = errors


class TodoValidationError(Exception):
    """Raised when todo data is invalid (e.g. blank title)."""

    def __init__(self, errors: dict[str, list[str]]):
        super().__init__("invalid todo")
        self.errors = errors


class AccountDeletionError(Exception):
    """Raised when deleting an account failed and was rolled back."""


def _field_name(loc: tuple) -> str:
    # ("body", "user", "email") → "email"; ("body",) and ("body", 12) → "body"
    parts = [p for p in loc if isinstance(p, str) and p not in ("body", "query", "path")]
    if parts:
        return parts[-1]
    return str(loc[0]) if loc else "request"


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        errors.setdefault(_field_name(tuple(err.get("loc", ()))), []).append(err["msg"])
    return JSONResponse(status_code=422, content={"errors": errors})


async def field_errors_handler(request: Request, exc: Exception):
    return JSONResponse(status_code=422, content={"errors": exc.errors})


async def account_deletion_handler(request: Request, exc: AccountDeletionError):
    logger.error("account.delete_failed", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=500,
        content={"error": "An error occurred while deleting the account"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(CredentialError, field_errors_handler)
    app.add_exception_handler(TodoValidationError, field_errors_handler)
    app.add_exception_handler(AccountDeletionError, account_deletion_handler)
