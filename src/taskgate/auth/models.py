"""
taskgate.auth.models

Auth domain models.

Responsibilities:
- Define the closed `Role` enum and the mapping from stored strings.
- Define the stored shapes the gate reads (`Principal`, `TokenRecord`).
- Define the identity handed to downstream handlers (`PrincipalContext`).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime


class Role(enum.StrEnum):
    # Values are persisted as-is; treat as stable API contract.
    admin = "admin"
    mortal = "mortal"


DEFAULT_ROLE = Role.mortal


class UnknownRoleError(ValueError):
    pass


def parse_role(value: str | Role) -> Role:
    """
    Map a stored role string onto `Role`.

    Raises `UnknownRoleError` for anything outside the enum (including None or
    differently-cased values) so malformed records never degrade into a guess.
    """
    if isinstance(value, Role):
        return value
    try:
        return Role(value)
    except ValueError as e:
        raise UnknownRoleError(f"unrecognized role: {value!r}") from e


@dataclass(frozen=True, slots=True)
class Principal:
    """
    A stored user identity. Profile fields are irrelevant to the gate.
    """

    id: str
    role: Role
    username: str = ""
    email: str = ""
    full_name: str | None = None
    birth_date: str | None = None


@dataclass(frozen=True, slots=True)
class TokenRecord:
    token: str
    principal_id: str
    expires_at: datetime

    def is_live(self, now: datetime) -> bool:
        # Valid strictly before the expiry instant.
        return now < self.expires_at


@dataclass(frozen=True, slots=True)
class PrincipalContext:
    """
    Trusted caller identity attached to the request once the gate grants access.
    """

    principal_id: str
    role: Role


# --- Module Notes -----------------------------------------------------------
# Role is read from the Principal, never from the token: a role change applies
# to tokens issued before it.
