"""
taskgate.db.repositories.tasks

Repository for `Task` rows owned by a user.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskgate.db.models import Task


class TaskRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_for_user(self, user_id: str) -> list[Task]:
        stmt = select(Task).where(Task.user_id == user_id).order_by(Task.created_at)
        return list((await self._session.execute(stmt)).scalars().all())

    async def create(
        self,
        *,
        user_id: str,
        name: str,
        description: str | None = None,
        due_date: str | None = None,
        status: str | None = None,
        category: str | None = None,
    ) -> Task:
        task = Task(
            user_id=user_id,
            name=name,
            description=description,
            due_date=due_date,
            status=status,
            category=category,
        )
        self._session.add(task)
        await self._session.flush()
        return task
