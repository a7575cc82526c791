"""
taskgate.db.repositories.users

Repository for `User` rows (the gate's principal store).

Responsibilities:
- Resolve a principal (id + parsed role) by id.
- Registration and login lookups by email.
- Admin operations: list users, change a role.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskgate.auth.models import DEFAULT_ROLE, Principal, Role, parse_role
from taskgate.db.models import User


def to_principal(user: User) -> Principal:
    # parse_role raises UnknownRoleError on a malformed stored role.
    return Principal(
        id=user.id,
        role=parse_role(user.role),
        username=user.username,
        email=user.email,
        full_name=user.full_name,
        birth_date=user.birth_date,
    )


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_principal(self, principal_id: str) -> Principal | None:
        user = await self._session.get(User, principal_id)
        return to_principal(user) if user is not None else None

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email == email).limit(1)
        return (await self._session.execute(stmt)).scalars().first()

    async def create(
        self,
        *,
        username: str,
        email: str,
        password_hash: str,
        full_name: str | None = None,
        birth_date: str | None = None,
        role: Role = DEFAULT_ROLE,
    ) -> User:
        user = User(
            username=username,
            email=email,
            password_hash=password_hash,
            full_name=full_name,
            birth_date=birth_date,
            role=role.value,
        )
        self._session.add(user)
        await self._session.flush()
        return user

    async def list_users(self, *, limit: int = 200) -> list[User]:
        stmt = select(User).order_by(User.username).limit(limit)
        return list((await self._session.execute(stmt)).scalars().all())

    async def set_role(self, user_id: str, role: Role) -> User | None:
        user = await self._session.get(User, user_id)
        if user is None:
            return None
        user.role = role.value
        await self._session.flush()
        return user
