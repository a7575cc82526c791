"""
taskgate.auth.stores

Store boundaries consumed by the gate and the token issuer.

Responsibilities:
- Describe the credential and principal stores as async protocols so the gate
  can run against SQL repositories in production and in-memory fakes in tests.
- Bundle both stores for injection into a request.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from taskgate.auth.models import Principal, TokenRecord


class CredentialStore(Protocol):
    async def find_token_record(self, token: str) -> TokenRecord | None: ...

    async def insert_token_record(self, record: TokenRecord) -> str: ...


class PrincipalStore(Protocol):
    async def find_principal(self, principal_id: str) -> Principal | None: ...


@dataclass(frozen=True, slots=True)
class AuthStores:
    credentials: CredentialStore
    principals: PrincipalStore


# --- Module Notes -----------------------------------------------------------
# SQL implementations live in `taskgate.db.repositories`; they are wired per
# request in `taskgate.api.deps.auth_stores`.
