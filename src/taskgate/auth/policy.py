"""
taskgate.auth.policy

Pure access evaluation for the authorization gate.

Responsibilities:
- Normalize a route's allowed-role set at registration time.
- Decide grant/deny from `(stored token, stored principal, allowed roles, now)`
  without touching a store, the network, or the clock.
"""

from __future__ import annotations

from collections.abc import Set
from datetime import datetime

from taskgate.auth.errors import (
    ExpiredCredential,
    Forbidden,
    InvalidCredential,
    UnknownPrincipal,
)
from taskgate.auth.models import Principal, PrincipalContext, Role, TokenRecord


def normalize_roles(allowed_roles: Set[Role]) -> frozenset[Role]:
    """
    Validate a route's role policy. An empty set means "authenticate only".

    A bare string is rejected outright: `"admin"` would otherwise iterate into
    single characters and silently deny everybody.
    """
    if isinstance(allowed_roles, (str, bytes)) or not isinstance(allowed_roles, Set):
        raise TypeError(
            f"allowed_roles must be a set of Role, got {type(allowed_roles).__name__}"
        )
    bad = [r for r in allowed_roles if not isinstance(r, Role)]
    if bad:
        raise TypeError(f"allowed_roles must contain only Role members, got {bad!r}")
    return frozenset(allowed_roles)


def evaluate_access(
    stored_token: TokenRecord | None,
    stored_principal: Principal | None,
    allowed_roles: frozenset[Role],
    now: datetime,
) -> PrincipalContext:
    """
    Run lookup, expiry, principal and role checks in that order.

    Returns the granted context, or raises the `AuthError` of the first failing
    step. Evaluating the same inputs twice yields the same outcome.
    """
    if stored_token is None:
        raise InvalidCredential()
    if not stored_token.is_live(now):
        raise ExpiredCredential()
    if stored_principal is None or stored_principal.id != stored_token.principal_id:
        raise UnknownPrincipal()
    if allowed_roles and stored_principal.role not in allowed_roles:
        raise Forbidden()
    return PrincipalContext(principal_id=stored_principal.id, role=stored_principal.role)
