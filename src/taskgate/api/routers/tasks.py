"""
taskgate.api.routers.tasks

Per-user tasks. Open to every authenticated principal; ownership comes from the
gate's `PrincipalContext`, never from the request body.
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED

from taskgate.api.deps import db_session
from taskgate.auth.deps import authenticated
from taskgate.auth.models import PrincipalContext
from taskgate.db.repositories.tasks import TaskRepo
from taskgate.errors import NotFoundError

router = APIRouter(prefix="/v1/tasks", tags=["tasks"])


class TaskCreate(BaseModel):
    name: str = Field(min_length=1, max_length=256)
    description: str | None = None
    due_date: str | None = Field(default=None, max_length=32)
    status: str | None = Field(default=None, max_length=64)
    category: str | None = Field(default=None, max_length=128)


class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    name: str
    description: str | None = None
    due_date: str | None = None
    status: str | None = None
    category: str | None = None
    created_at: datetime


class TaskList(BaseModel):
    tasks: list[TaskOut]


class TaskCreated(BaseModel):
    message: str
    task: TaskOut


@router.get("", response_model=TaskList)
async def list_tasks(
    principal: PrincipalContext = Depends(authenticated),
    session: AsyncSession = Depends(db_session),
) -> TaskList:
    tasks = await TaskRepo(session).list_for_user(principal.principal_id)
    if not tasks:
        raise NotFoundError("no tasks found")
    return TaskList(tasks=[TaskOut.model_validate(t) for t in tasks])


@router.post("", response_model=TaskCreated, status_code=HTTP_201_CREATED)
async def add_task(
    body: TaskCreate,
    principal: PrincipalContext = Depends(authenticated),
    session: AsyncSession = Depends(db_session),
) -> TaskCreated:
    task = await TaskRepo(session).create(user_id=principal.principal_id, **body.model_dump())
    await session.commit()
    return TaskCreated(message="task added", task=TaskOut.model_validate(task))
