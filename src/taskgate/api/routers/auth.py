"""
taskgate.api.routers.auth

Registration, login (token issuance) and logout.

Responsibilities:
- Register a principal with the default role and a bcrypt password hash.
- Verify credentials and mint a bearer token through `TokenIssuer`.
- Drop the presented token record on logout.
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool
from starlette.status import HTTP_201_CREATED

from taskgate.api.deps import db_session, now_dep, settings_dep
from taskgate.auth.deps import authenticated, bearer_scheme
from taskgate.auth.issuer import TokenIssuer
from taskgate.auth.models import PrincipalContext
from taskgate.auth.passwords import check_password_length, hash_password, verify_password
from taskgate.db.repositories.tokens import TokenRepo
from taskgate.db.repositories.users import UserRepo
from taskgate.errors import ConflictError, InvalidCredentialsError, NotFoundError
from taskgate.observability.logging import get_logger
from taskgate.settings import Settings

log = get_logger(__name__)

router = APIRouter(prefix="/v1/auth", tags=["auth"])


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    full_name: str | None = None
    birth_date: str | None = None
    email: str
    role: str


class RegisterRequest(BaseModel):
    username: str = Field(min_length=1, max_length=128)
    full_name: str | None = Field(default=None, max_length=256)
    birth_date: str | None = Field(default=None, max_length=32)
    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=1, max_length=72)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return check_password_length(value)


class RegisterResponse(BaseModel):
    message: str
    user: UserOut


class LoginRequest(BaseModel):
    email: str = Field(min_length=1, max_length=320)
    password: str = Field(min_length=1, max_length=72)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return check_password_length(value)


class LoginResponse(BaseModel):
    message: str
    token: str
    expires_at: datetime
    user: UserOut


@router.post("/register", response_model=RegisterResponse, status_code=HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> RegisterResponse:
    users = UserRepo(session)
    if await users.get_by_email(body.email) is not None:
        raise ConflictError("email already registered")

    password_hash = await run_in_threadpool(
        hash_password, body.password, rounds=settings.bcrypt_rounds
    )
    try:
        user = await users.create(
            username=body.username,
            email=body.email,
            password_hash=password_hash,
            full_name=body.full_name,
            birth_date=body.birth_date,
        )
        await session.commit()
    except IntegrityError as e:
        # A concurrent registration won the unique(email) race.
        await session.rollback()
        raise ConflictError("email already registered") from e

    log.info("user.registered", user_id=user.id)
    return RegisterResponse(message="registration successful", user=UserOut.model_validate(user))


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
    now: datetime = Depends(now_dep),
) -> LoginResponse:
    user = await UserRepo(session).get_by_email(body.email)
    if user is None:
        raise NotFoundError("user not found")
    if not await run_in_threadpool(verify_password, body.password, user.password_hash):
        log.info("login.rejected", user_id=user.id)
        raise InvalidCredentialsError("incorrect password")

    issuer = TokenIssuer.from_settings(settings, TokenRepo(session))
    issued = await issuer.issue(principal_id=user.id, email=user.email, now=now)
    await session.commit()

    return LoginResponse(
        message="login successful",
        token=issued.token,
        expires_at=issued.expires_at,
        user=UserOut.model_validate(user),
    )


@router.post("/logout")
async def logout(
    principal: PrincipalContext = Depends(authenticated),
    creds: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    session: AsyncSession = Depends(db_session),
) -> dict[str, str]:
    # The gate has already validated creds; only this one token is dropped.
    await TokenRepo(session).delete_token(creds.credentials)
    await session.commit()
    log.info("user.logged_out", user_id=principal.principal_id)
    return {"message": "logged out"}
