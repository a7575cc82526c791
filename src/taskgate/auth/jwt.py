"""
taskgate.auth.jwt

JWT minting for bearer tokens.

Responsibilities:
- Sign a short-lived token carrying the principal id and email.

Note:
- The gate never trusts the token's own claims; a token is honored only while a
  matching record exists in the credential store. The signature and `exp` claim
  let other services verify the token offline if they need to.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import jwt


@dataclass(frozen=True, slots=True)
class JwtConfig:
    alg: str
    secret: str


def issue_token(
    *,
    cfg: JwtConfig,
    subject: str,
    email: str,
    issued_at: datetime,
    expires_at: datetime,
) -> str:
    # `jti` keeps two tokens minted in the same second for the same user distinct.
    payload: dict[str, Any] = {
        "sub": subject,
        "email": email,
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(payload, cfg.secret, algorithm=cfg.alg)


# --- Module Notes -----------------------------------------------------------
# Token issuing is used by `auth/issuer.py` (login flow).
