"""
taskgate.auth.issuer

Token issuance at successful login.

Responsibilities:
- Mint a signed token with a fixed validity window.
- Persist the matching `TokenRecord` in the credential store.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from taskgate.auth.jwt import JwtConfig, issue_token
from taskgate.auth.models import TokenRecord
from taskgate.auth.stores import CredentialStore
from taskgate.observability.logging import get_logger
from taskgate.settings import Settings

log = get_logger(__name__)

DEFAULT_TOKEN_TTL = timedelta(minutes=10)


@dataclass(frozen=True, slots=True)
class IssuedToken:
    token: str
    expires_at: datetime


class TokenIssuer:
    """
    One new record per call: no dedup and no revocation of the principal's
    earlier tokens.
    """

    def __init__(
        self,
        *,
        cfg: JwtConfig,
        credentials: CredentialStore,
        ttl: timedelta = DEFAULT_TOKEN_TTL,
    ) -> None:
        self._cfg = cfg
        self._credentials = credentials
        self._ttl = ttl

    @classmethod
    def from_settings(cls, settings: Settings, credentials: CredentialStore) -> TokenIssuer:
        return cls(
            cfg=JwtConfig(alg=settings.jwt_alg, secret=settings.jwt_secret),
            credentials=credentials,
            ttl=timedelta(minutes=settings.token_ttl_minutes),
        )

    async def issue(
        self, *, principal_id: str, email: str, now: datetime | None = None
    ) -> IssuedToken:
        issued_at = now or datetime.now(tz=UTC)
        expires_at = issued_at + self._ttl
        token = issue_token(
            cfg=self._cfg,
            subject=principal_id,
            email=email,
            issued_at=issued_at,
            expires_at=expires_at,
        )
        await self._credentials.insert_token_record(
            TokenRecord(token=token, principal_id=principal_id, expires_at=expires_at)
        )
        log.info("token.issued", principal_id=principal_id, expires_at=expires_at.isoformat())
        return IssuedToken(token=token, expires_at=expires_at)
