"""
taskgate.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings, DB sessions and the clock.
- Build the gate's stores from the request-scoped session, so tests can swap
  them for in-memory fakes through `app.dependency_overrides`.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import UTC, datetime

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from taskgate.auth.stores import AuthStores
from taskgate.db.repositories.tokens import TokenRepo
from taskgate.db.repositories.users import UserRepo
from taskgate.settings import Settings, get_settings


def settings_dep(request: Request) -> Settings:
    # Prefer the settings the app was built with over the process-wide cache.
    settings = getattr(request.app.state, "settings", None)
    return settings if settings is not None else get_settings()


def now_dep() -> datetime:
    return datetime.now(tz=UTC)


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # Created on app startup in `taskgate.api.app.create_app`.
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Route handlers commit explicitly.
    async with session_factory() as session:
        yield session


def auth_stores(session: AsyncSession = Depends(db_session)) -> AuthStores:
    return AuthStores(credentials=TokenRepo(session), principals=UserRepo(session))
