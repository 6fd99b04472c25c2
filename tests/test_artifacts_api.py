"""Tests for artifact read endpoints and authentication."""

import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from httpx import AsyncClient

from ats_server.core.config import settings


async def _generate(client: AsyncClient, headers: dict, job_id: int, endpoint: str = "resume") -> dict:
    resp = await client.post(f"/api/v1/generate/{endpoint}", json={"jobId": job_id}, headers=headers)
    assert resp.status_code == 201
    return resp.json()


def _token(sub: str, audience: str = "authenticated", secret: str | None = None) -> str:
    now = datetime.now(timezone.utc)
    payload = {"sub": sub, "aud": audience, "role": "authenticated", "iat": now, "exp": now + timedelta(hours=1)}
    return jwt.encode(payload, secret or settings.supabase_jwt_secret, algorithm="HS256")


@pytest.mark.asyncio
async def test_list_artifacts(client: AsyncClient, auth_headers: dict, job):
    await _generate(client, auth_headers, job.id, "resume")
    await _generate(client, auth_headers, job.id, "cover-letter")

    resp = await client.get("/api/v1/artifacts", headers=auth_headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 2
    assert {item["kind"] for item in data["items"]} == {"resume", "cover_letter"}
    item = data["items"][0]
    assert item["job_id"] == job.id
    assert item["metadata"]["provider"] == "mock"
    assert item["title"].endswith("Senior Backend Engineer")


@pytest.mark.asyncio
async def test_list_filters_and_pagination(client: AsyncClient, auth_headers: dict, job):
    for _ in range(3):
        await _generate(client, auth_headers, job.id, "resume")
    await _generate(client, auth_headers, job.id, "skills-optimization")

    resp = await client.get("/api/v1/artifacts", params={"kind": "resume"}, headers=auth_headers)
    assert resp.json()["total"] == 3

    resp = await client.get("/api/v1/artifacts", params={"kind": "resume", "limit": 2, "offset": 2}, headers=auth_headers)
    data = resp.json()
    assert data["total"] == 3
    assert len(data["items"]) == 1

    resp = await client.get("/api/v1/artifacts", params={"jobId": job.id + 1}, headers=auth_headers)
    assert resp.json()["total"] == 0


@pytest.mark.asyncio
async def test_list_rejects_unknown_kind(client: AsyncClient, auth_headers: dict, profile):
    resp = await client.get("/api/v1/artifacts", params={"kind": "poem"}, headers=auth_headers)
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_get_artifact(client: AsyncClient, auth_headers: dict, job):
    created = await _generate(client, auth_headers, job.id)

    resp = await client.get(f"/api/v1/artifacts/{created['id']}", headers=auth_headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["id"] == created["id"]
    assert data["content"] == created["content"]
    assert data["model"] == "gpt-4o-mini"


@pytest.mark.asyncio
async def test_artifacts_are_owner_scoped(client: AsyncClient, auth_headers: dict, other_headers: dict, job):
    created = await _generate(client, auth_headers, job.id)

    resp = await client.get(f"/api/v1/artifacts/{created['id']}", headers=other_headers)
    assert resp.status_code == 404

    resp = await client.get("/api/v1/artifacts", headers=other_headers)
    assert resp.json() == {"items": [], "total": 0}


@pytest.mark.asyncio
async def test_get_unknown_artifact(client: AsyncClient, auth_headers: dict, profile):
    resp = await client.get(f"/api/v1/artifacts/{uuid.uuid4()}", headers=auth_headers)
    assert resp.status_code == 404
    assert resp.json()["code"] == "not_found"


# ==========================================================================
# Auth
# ==========================================================================


@pytest.mark.asyncio
async def test_bearer_token(client: AsyncClient, auth_headers: dict, job):
    bearer = {"Authorization": f"Bearer {_token(auth_headers['X-User-Id'])}"}
    await _generate(client, bearer, job.id)
    resp = await client.get("/api/v1/artifacts", headers=bearer)
    assert resp.status_code == 200
    assert resp.json()["total"] == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "token",
    [
        _token(str(uuid.uuid4()), secret="another-secret-that-is-at-least-32-bytes"),
        _token(str(uuid.uuid4()), audience="anon"),
        _token("not-a-uuid"),
        "garbage",
    ],
)
async def test_bad_tokens_rejected(client: AsyncClient, token: str):
    resp = await client.get("/api/v1/artifacts", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_non_bearer_header_rejected(client: AsyncClient):
    resp = await client.get("/api/v1/artifacts", headers={"Authorization": "Basic abc"})
    assert resp.status_code == 401


# ==========================================================================
# Service endpoints
# ==========================================================================


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "ai_provider": "mock", "mock": True}


@pytest.mark.asyncio
async def test_metrics_exposes_generation_counters(client: AsyncClient, auth_headers: dict, job):
    await _generate(client, auth_headers, job.id)
    resp = await client.get("/metrics")
    assert resp.status_code == 200
    assert 'ai_generations_total{kind="resume",status="success"}' in resp.text
    assert "ai_gateway_attempts_total" in resp.text


@pytest.mark.asyncio
async def test_request_id_header(client: AsyncClient):
    resp = await client.get("/health", headers={"X-Request-Id": "abc123"})
    assert resp.headers["X-Request-Id"] == "abc123"
