"""
taskgate.errors

Application error hierarchy.

Responsibilities:
- Carry an HTTP status and a client-facing message for expected failures.
- Render the JSON failure body (`{"message": ...}`) in one place.
"""

from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Base error for expected failures."""

    http_status: int = 400

    def __init__(
        self,
        message: str,
        *,
        http_status: int | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if http_status is not None:
            self.http_status = http_status
        self.headers = headers

    def to_body(self) -> dict[str, Any]:
        return {"message": self.message}


class NotFoundError(AppError):
    http_status = 404


class ConflictError(AppError):
    # Duplicate registrations are answered with a plain 400, not 409.
    http_status = 400


class InvalidCredentialsError(AppError):
    http_status = 401
