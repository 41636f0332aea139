"""
Custom exception hierarchy for Streakboard.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette import status

logger = logging.getLogger("streakboard.errors")


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class StreakboardException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class GoalNotFoundError(StreakboardException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "GOAL_NOT_FOUND"

    def __init__(self, goal_id: int):
        super().__init__(
            message=f"Goal {goal_id} does not exist.",
            details={"goal_id": goal_id},
        )


class GoalOwnershipError(StreakboardException):
    http_status = status.HTTP_403_FORBIDDEN
    code = "NOT_GOAL_OWNER"

    def __init__(self, goal_id: int, user_id: str):
        super().__init__(
            message=f"Goal {goal_id} does not belong to user {user_id}.",
            details={"goal_id": goal_id, "user_id": user_id},
        )


class ProfileNotFoundError(StreakboardException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "PROFILE_NOT_FOUND"

    def __init__(self, user_id: str):
        super().__init__(
            message=f"No profile for user {user_id}. Sign in to create one.",
            details={"user_id": user_id},
        )


class MissingIdentityError(StreakboardException):
    http_status = status.HTTP_401_UNAUTHORIZED
    code = "MISSING_IDENTITY"

    def __init__(self, header: str = "X-User-Id"):
        super().__init__(
            message=f"Request is not signed in: {header} header is missing.",
            details={"header": header},
        )


class ImmutableFieldError(StreakboardException):
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "IMMUTABLE_FIELD"

    def __init__(self, field: str):
        super().__init__(
            message=f"Goal field '{field}' cannot be updated.",
            details={"field": field},
        )


class StoreUnavailableError(StreakboardException):
    http_status = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "STORE_UNAVAILABLE"

    def __init__(self):
        super().__init__(
            message="The goal store could not complete the request. Try again.",
        )


class InvalidCompletionDateError(ValueError):
    """Raised by the streak engine for a completion date that is not YYYY-MM-DD."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Invalid completion date: {value!r}")


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def streakboard_exception_handler(
    request: Request, exc: StreakboardException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def store_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("store error on %s %s: %s", request.method, request.url.path, exc)
    err = StoreUnavailableError()
    return JSONResponse(status_code=err.http_status, content=err.to_dict())


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
