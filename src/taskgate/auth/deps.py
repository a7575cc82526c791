"""
taskgate.auth.deps

The authorization gate as a FastAPI dependency factory.

Responsibilities:
- Extract the bearer credential from the request.
- Load the token record and (only for a live token) its principal.
- Delegate the decision to `policy.evaluate_access` and attach the granted
  `PrincipalContext` to the request.
- Convert any unexpected failure into `AuthorizationCheckFailed` (500).

Usage:
    @router.get("/users", dependencies=[Depends(authorize({Role.admin}))])
    @router.get("/tasks")
    async def list_tasks(principal: PrincipalContext = Depends(authenticated)): ...
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Set
from datetime import datetime

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from taskgate.api.deps import auth_stores, now_dep
from taskgate.auth.errors import AuthError, AuthorizationCheckFailed, MissingCredential
from taskgate.auth.models import PrincipalContext, Role
from taskgate.auth.policy import evaluate_access, normalize_roles
from taskgate.auth.stores import AuthStores
from taskgate.observability.logging import get_logger

log = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

Gate = Callable[..., Awaitable[PrincipalContext]]


def authorize(allowed_roles: Set[Role] = frozenset(), /) -> Gate:
    """
    Build a gate for one route. `allowed_roles` is the route's whole policy;
    leave it empty to only authenticate.
    """
    roles = normalize_roles(allowed_roles)

    async def _gate(
        request: Request,
        creds: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
        stores: AuthStores = Depends(auth_stores),
        now: datetime = Depends(now_dep),
    ) -> PrincipalContext:
        try:
            if creds is None or not creds.credentials:
                raise MissingCredential()

            record = await stores.credentials.find_token_record(creds.credentials)
            principal = None
            if record is not None and record.is_live(now):
                principal = await stores.principals.find_principal(record.principal_id)

            ctx = evaluate_access(record, principal, roles, now)
        except AuthError as e:
            log.info("auth.denied", reason=e.reason, status=e.http_status)
            raise
        except Exception as e:
            log.exception("auth.check_failed", error=str(e))
            raise AuthorizationCheckFailed(str(e)) from e

        request.state.principal = ctx
        structlog.contextvars.bind_contextvars(principal_id=ctx.principal_id)
        log.info("auth.granted", role=ctx.role.value)
        return ctx

    return _gate


# Authentication-only gate shared by routes open to every role.
authenticated = authorize()


# --- Module Notes -----------------------------------------------------------
# The gate holds no state between requests and caches nothing: every request
# re-reads both stores through the request-scoped session.
