"""
tests.conftest

Shared fixtures and in-memory store fakes.

Responsibilities:
- Fake credential/principal stores that record how often they were queried.
- A small gate-only FastAPI app wired to the fakes and a controllable clock.
- A SQLite-backed settings fixture for end-to-end tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from pathlib import Path

import httpx
import pytest
from fastapi import Depends, FastAPI, Request

from taskgate.api.app import install_error_handlers
from taskgate.api.deps import auth_stores, now_dep
from taskgate.auth.deps import authenticated, authorize
from taskgate.auth.models import Principal, PrincipalContext, Role, TokenRecord
from taskgate.auth.stores import AuthStores
from taskgate.settings import Settings

T0 = datetime(2026, 3, 1, 12, 0, 0, tzinfo=UTC)


@dataclass
class Clock:
    now: datetime = T0

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@dataclass
class FakeCredentialStore:
    records: list[TokenRecord] = field(default_factory=list)
    lookups: int = 0
    fail_with: Exception | None = None

    async def find_token_record(self, token: str) -> TokenRecord | None:
        self.lookups += 1
        if self.fail_with is not None:
            raise self.fail_with
        return next((r for r in self.records if r.token == token), None)

    async def insert_token_record(self, record: TokenRecord) -> str:
        self.records.append(record)
        return str(len(self.records))


@dataclass
class FakePrincipalStore:
    principals: dict[str, Principal] = field(default_factory=dict)
    lookups: int = 0
    fail_with: Exception | None = None

    async def find_principal(self, principal_id: str) -> Principal | None:
        self.lookups += 1
        if self.fail_with is not None:
            raise self.fail_with
        return self.principals.get(principal_id)

    def add(self, principal_id: str, role: Role) -> Principal:
        principal = Principal(id=principal_id, role=role, email=f"{principal_id}@example.com")
        self.principals[principal_id] = principal
        return principal


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def credentials() -> FakeCredentialStore:
    return FakeCredentialStore()


@pytest.fixture
def principals() -> FakePrincipalStore:
    return FakePrincipalStore()


def _context(ctx: PrincipalContext) -> dict[str, str]:
    return {"principal_id": ctx.principal_id, "role": ctx.role.value}


@pytest.fixture
def gate_app(
    credentials: FakeCredentialStore, principals: FakePrincipalStore, clock: Clock
) -> FastAPI:
    app = FastAPI()
    install_error_handlers(app)
    stores = AuthStores(credentials=credentials, principals=principals)
    app.dependency_overrides[auth_stores] = lambda: stores
    app.dependency_overrides[now_dep] = lambda: clock.now

    @app.get("/open")
    async def open_route(ctx: PrincipalContext = Depends(authenticated)) -> dict[str, str]:
        return _context(ctx)

    @app.get("/admin")
    async def admin_route(
        ctx: PrincipalContext = Depends(authorize({Role.admin})),
    ) -> dict[str, str]:
        return _context(ctx)

    @app.get("/staff")
    async def staff_route(
        ctx: PrincipalContext = Depends(authorize({Role.admin, Role.mortal})),
    ) -> dict[str, str]:
        return _context(ctx)

    @app.get("/state", dependencies=[Depends(authenticated)])
    async def state_route(request: Request) -> dict[str, str]:
        return _context(request.state.principal)

    return app


def client_for(app: FastAPI) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'taskgate.db'}",
        bcrypt_rounds=4,
        jwt_secret="test-secret",
    )
