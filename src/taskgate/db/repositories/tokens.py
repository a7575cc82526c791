"""
taskgate.db.repositories.tokens

Repository for issued token records (the gate's credential store).

Responsibilities:
- Look up a record by its token string.
- Append records at login.
- Delete a single token (logout) or sweep expired ones on demand.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskgate.auth.models import TokenRecord
from taskgate.db.models import TokenRecordRow
from taskgate.db.repositories._time import as_utc


class TokenRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_token_record(self, token: str) -> TokenRecord | None:
        stmt = select(TokenRecordRow).where(TokenRecordRow.token == token).limit(1)
        row = (await self._session.execute(stmt)).scalars().first()
        if row is None:
            return None
        return TokenRecord(
            token=row.token,
            principal_id=row.user_id,
            expires_at=as_utc(row.expires_at),
        )

    async def insert_token_record(self, record: TokenRecord) -> str:
        row = TokenRecordRow(
            token=record.token,
            user_id=record.principal_id,
            expires_at=record.expires_at,
        )
        self._session.add(row)
        await self._session.flush()
        return row.id

    async def delete_token(self, token: str) -> int:
        result = await self._session.execute(
            delete(TokenRecordRow).where(TokenRecordRow.token == token)
        )
        return result.rowcount or 0

    async def purge_expired(self, *, now: datetime) -> int:
        # Same boundary as the gate: a record expiring exactly at `now` is dead.
        result = await self._session.execute(
            delete(TokenRecordRow).where(TokenRecordRow.expires_at <= now)
        )
        return result.rowcount or 0


# --- Module Notes -----------------------------------------------------------
# Commit is left to the caller (route handler), as with every repository here.
