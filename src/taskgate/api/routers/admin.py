"""
taskgate.api.routers.admin

Maintenance endpoints for administrators.

Expired token records accumulate until an admin (or a scheduled job calling
this endpoint) purges them; the gate itself never deletes records.
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskgate.api.deps import db_session, now_dep
from taskgate.auth.deps import authorize
from taskgate.auth.models import Role
from taskgate.db.repositories.tokens import TokenRepo
from taskgate.observability.logging import get_logger

log = get_logger(__name__)

router = APIRouter(
    prefix="/v1/admin",
    tags=["admin"],
    dependencies=[Depends(authorize({Role.admin}))],
)


@router.post("/tokens/purge")
async def purge_expired_tokens(
    session: AsyncSession = Depends(db_session),
    now: datetime = Depends(now_dep),
) -> dict[str, int]:
    purged = await TokenRepo(session).purge_expired(now=now)
    await session.commit()
    log.info("tokens.purged", count=purged)
    return {"purged": purged}
