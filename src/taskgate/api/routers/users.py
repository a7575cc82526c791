"""
taskgate.api.routers.users

Admin-only principal management. A role change is picked up by the gate on the
principal's next request, including for tokens issued before the change.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from taskgate.api.deps import db_session
from taskgate.api.routers.auth import UserOut
from taskgate.auth.deps import authorize
from taskgate.auth.models import PrincipalContext, Role
from taskgate.db.repositories.users import UserRepo
from taskgate.errors import NotFoundError
from taskgate.observability.logging import get_logger

log = get_logger(__name__)

require_admin = authorize({Role.admin})

router = APIRouter(prefix="/v1/users", tags=["users"], dependencies=[Depends(require_admin)])


class RoleChange(BaseModel):
    role: Role


@router.get("", response_model=list[UserOut])
async def list_users(session: AsyncSession = Depends(db_session)) -> list[UserOut]:
    return [UserOut.model_validate(u) for u in await UserRepo(session).list_users()]


@router.patch("/{user_id}/role", response_model=UserOut)
async def change_role(
    user_id: str,
    body: RoleChange,
    admin: PrincipalContext = Depends(require_admin),
    session: AsyncSession = Depends(db_session),
) -> UserOut:
    user = await UserRepo(session).set_role(user_id, body.role)
    if user is None:
        raise NotFoundError("user not found")
    await session.commit()
    log.info("user.role_changed", user_id=user_id, role=body.role.value, by=admin.principal_id)
    return UserOut.model_validate(user)
