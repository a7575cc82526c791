"""
tests.test_gate

The authorization gate over HTTP, against in-memory stores and a fixed clock.
"""

from __future__ import annotations

from datetime import timedelta

import pytest
from fastapi import FastAPI

from conftest import Clock, FakeCredentialStore, FakePrincipalStore, bearer, client_for
from taskgate.auth.deps import authorize
from taskgate.auth.models import Principal, Role, TokenRecord

ROUTES = ["/open", "/admin", "/staff"]


def _grant(
    credentials: FakeCredentialStore,
    principals: FakePrincipalStore,
    clock: Clock,
    *,
    principal_id: str = "u1",
    role: Role = Role.mortal,
    token: str = "tok-u1",
    ttl: timedelta = timedelta(minutes=10),
) -> str:
    principals.add(principal_id, role)
    credentials.records.append(
        TokenRecord(token=token, principal_id=principal_id, expires_at=clock.now + ttl)
    )
    return token


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ROUTES)
async def test_missing_header_is_401_on_every_policy(gate_app: FastAPI, path: str) -> None:
    async with client_for(gate_app) as client:
        r = await client.get(path)
    assert r.status_code == 401
    assert r.json() == {"message": "missing credential"}
    assert r.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
@pytest.mark.parametrize("header", ["Basic dXNlcjpwYXNz", "Bearer", "tok-u1"])
async def test_malformed_header_is_missing_credential(
    gate_app: FastAPI, credentials: FakeCredentialStore, header: str
) -> None:
    async with client_for(gate_app) as client:
        r = await client.get("/open", headers={"Authorization": header})
    assert r.status_code == 401
    assert r.json()["message"] == "missing credential"
    assert credentials.lookups == 0


@pytest.mark.asyncio
async def test_unknown_token_is_invalid_credential(gate_app: FastAPI) -> None:
    async with client_for(gate_app) as client:
        r = await client.get("/open", headers=bearer("nope"))
    assert r.status_code == 401
    assert r.json() == {"message": "invalid credential"}


@pytest.mark.asyncio
async def test_expired_token_is_rejected_and_kept(
    gate_app: FastAPI,
    credentials: FakeCredentialStore,
    principals: FakePrincipalStore,
    clock: Clock,
) -> None:
    token = _grant(credentials, principals, clock, role=Role.admin)
    clock.advance(minutes=10, seconds=1)

    async with client_for(gate_app) as client:
        r = await client.get("/admin", headers=bearer(token))
    assert r.status_code == 401
    assert r.json() == {"message": "expired credential"}
    # Expiry check neither resolves the principal nor deletes the record.
    assert principals.lookups == 0
    assert len(credentials.records) == 1


@pytest.mark.asyncio
async def test_dangling_principal_is_unknown_principal(
    gate_app: FastAPI,
    credentials: FakeCredentialStore,
    principals: FakePrincipalStore,
    clock: Clock,
) -> None:
    token = _grant(credentials, principals, clock)
    del principals.principals["u1"]

    async with client_for(gate_app) as client:
        r = await client.get("/open", headers=bearer(token))
    assert r.status_code == 401
    assert r.json() == {"message": "unknown principal"}


@pytest.mark.asyncio
async def test_role_matrix(
    gate_app: FastAPI,
    credentials: FakeCredentialStore,
    principals: FakePrincipalStore,
    clock: Clock,
) -> None:
    token = _grant(credentials, principals, clock, role=Role.mortal)

    async with client_for(gate_app) as client:
        denied = await client.get("/admin", headers=bearer(token))
        granted = await client.get("/staff", headers=bearer(token))
        open_ = await client.get("/open", headers=bearer(token))

    assert denied.status_code == 403
    assert denied.json() == {"message": "insufficient role"}
    assert granted.status_code == 200
    assert granted.json() == {"principal_id": "u1", "role": "mortal"}
    assert open_.status_code == 200


@pytest.mark.asyncio
async def test_admin_passes_admin_route(
    gate_app: FastAPI,
    credentials: FakeCredentialStore,
    principals: FakePrincipalStore,
    clock: Clock,
) -> None:
    token = _grant(credentials, principals, clock, principal_id="a1", role=Role.admin, token="tok-a1")
    async with client_for(gate_app) as client:
        r = await client.get("/admin", headers=bearer(token))
    assert r.status_code == 200
    assert r.json() == {"principal_id": "a1", "role": "admin"}


@pytest.mark.asyncio
async def test_validation_is_idempotent_and_uncached(
    gate_app: FastAPI,
    credentials: FakeCredentialStore,
    principals: FakePrincipalStore,
    clock: Clock,
) -> None:
    token = _grant(credentials, principals, clock)
    before = list(credentials.records)

    async with client_for(gate_app) as client:
        first = await client.get("/staff", headers=bearer(token))
        second = await client.get("/staff", headers=bearer(token))

    assert first.status_code == second.status_code == 200
    assert first.json() == second.json()
    assert credentials.records == before
    assert credentials.lookups == 2
    assert principals.lookups == 2


@pytest.mark.asyncio
async def test_context_is_attached_to_request_state(
    gate_app: FastAPI,
    credentials: FakeCredentialStore,
    principals: FakePrincipalStore,
    clock: Clock,
) -> None:
    token = _grant(credentials, principals, clock)
    async with client_for(gate_app) as client:
        r = await client.get("/state", headers=bearer(token))
    assert r.json() == {"principal_id": "u1", "role": "mortal"}


@pytest.mark.asyncio
async def test_role_change_applies_to_existing_token(
    gate_app: FastAPI,
    credentials: FakeCredentialStore,
    principals: FakePrincipalStore,
    clock: Clock,
) -> None:
    token = _grant(credentials, principals, clock, role=Role.mortal)
    async with client_for(gate_app) as client:
        assert (await client.get("/admin", headers=bearer(token))).status_code == 403
        principals.principals["u1"] = Principal(id="u1", role=Role.admin)
        assert (await client.get("/admin", headers=bearer(token))).status_code == 200


@pytest.mark.asyncio
async def test_several_live_tokens_per_principal(
    gate_app: FastAPI,
    credentials: FakeCredentialStore,
    principals: FakePrincipalStore,
    clock: Clock,
) -> None:
    first = _grant(credentials, principals, clock, token="tok-1")
    second = _grant(credentials, principals, clock, token="tok-2")
    async with client_for(gate_app) as client:
        assert (await client.get("/open", headers=bearer(first))).status_code == 200
        assert (await client.get("/open", headers=bearer(second))).status_code == 200


@pytest.mark.asyncio
async def test_store_failure_is_internal_error(
    gate_app: FastAPI, credentials: FakeCredentialStore
) -> None:
    credentials.fail_with = ConnectionError("store unreachable")
    async with client_for(gate_app) as client:
        r = await client.get("/open", headers=bearer("tok"))
    assert r.status_code == 500
    assert r.json() == {"message": "authorization check failed", "error": "store unreachable"}


@pytest.mark.asyncio
async def test_malformed_stored_role_is_internal_error(
    gate_app: FastAPI,
    credentials: FakeCredentialStore,
    principals: FakePrincipalStore,
    clock: Clock,
) -> None:
    token = _grant(credentials, principals, clock)
    principals.fail_with = ValueError("unrecognized role: 'superuser'")
    async with client_for(gate_app) as client:
        r = await client.get("/open", headers=bearer(token))
    assert r.status_code == 500
    assert r.json()["message"] == "authorization check failed"
    assert "superuser" in r.json()["error"]


def test_authorize_takes_exactly_one_role_set() -> None:
    with pytest.raises(TypeError):
        authorize({Role.admin}, {Role.mortal})  # type: ignore[call-arg]
    with pytest.raises(TypeError):
        authorize(allowed_roles={Role.admin})  # type: ignore[call-arg]
    with pytest.raises(TypeError):
        authorize("admin")  # type: ignore[arg-type]
