"""
taskgate.auth.errors

Typed rejections produced by the authorization gate.

Taxonomy:
- `Unauthenticated` (401): missing/invalid/expired credential, unknown principal.
- `Forbidden` (403): principal's role is outside the route's allowed set.
- `AuthorizationCheckFailed` (500): store or data failure during the check.

Each error carries a stable `reason` code used in logs and tests.
"""

from __future__ import annotations

from typing import Any

from taskgate.errors import AppError

_BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


class AuthError(AppError):
    reason: str = "denied"
    default_message: str = "access denied"

    def __init__(self, message: str | None = None, **kwargs: Any) -> None:
        super().__init__(message or self.default_message, **kwargs)


class Unauthenticated(AuthError):
    http_status = 401

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message, headers=dict(_BEARER_CHALLENGE))


class MissingCredential(Unauthenticated):
    reason = "missing_credential"
    default_message = "missing credential"


class InvalidCredential(Unauthenticated):
    reason = "invalid_credential"
    default_message = "invalid credential"


class ExpiredCredential(Unauthenticated):
    reason = "expired_credential"
    default_message = "expired credential"


class UnknownPrincipal(Unauthenticated):
    reason = "unknown_principal"
    default_message = "unknown principal"


class Forbidden(AuthError):
    http_status = 403
    reason = "insufficient_role"
    default_message = "insufficient role"


class AuthorizationCheckFailed(AuthError):
    http_status = 500
    reason = "check_failed"
    default_message = "authorization check failed"

    def __init__(self, error: str) -> None:
        super().__init__()
        self.error = error

    def to_body(self) -> dict[str, Any]:
        return {"message": self.message, "error": self.error}
