"""Tests for attaching generated artifacts to a job."""

import uuid

import pytest
from httpx import AsyncClient


async def _generate(client: AsyncClient, headers: dict, job_id: int, endpoint: str) -> str:
    resp = await client.post(f"/api/v1/generate/{endpoint}", json={"jobId": job_id}, headers=headers)
    assert resp.status_code == 201
    return resp.json()["id"]


@pytest.mark.asyncio
async def test_create_and_list_materials(client: AsyncClient, auth_headers: dict, job):
    resume_id = await _generate(client, auth_headers, job.id, "resume")
    cover_id = await _generate(client, auth_headers, job.id, "cover-letter")

    resp = await client.post(
        "/api/v1/jobs/materials",
        json={
            "jobId": job.id,
            "resume_artifact_id": resume_id,
            "cover_artifact_id": cover_id,
            "metadata": {"note": "final"},
        },
        headers=auth_headers,
    )
    assert resp.status_code == 201
    material = resp.json()["material"]
    assert material["job_id"] == job.id
    assert material["resume_artifact_id"] == resume_id
    assert material["cover_artifact_id"] == cover_id
    assert material["metadata"] == {"note": "final"}

    resp = await client.get(f"/api/v1/jobs/{job.id}/materials", headers=auth_headers)
    assert resp.status_code == 200
    items = resp.json()["items"]
    assert [item["id"] for item in items] == [material["id"]]


@pytest.mark.asyncio
async def test_resume_only(client: AsyncClient, auth_headers: dict, job):
    resume_id = await _generate(client, auth_headers, job.id, "resume")
    resp = await client.post(
        "/api/v1/jobs/materials", json={"jobId": job.id, "resume_artifact_id": resume_id}, headers=auth_headers
    )
    assert resp.status_code == 201
    assert resp.json()["material"]["cover_artifact_id"] is None


@pytest.mark.asyncio
async def test_requires_an_artifact(client: AsyncClient, auth_headers: dict, job):
    resp = await client.post("/api/v1/jobs/materials", json={"jobId": job.id}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json()["code"] == "bad_request"


@pytest.mark.asyncio
async def test_missing_job(client: AsyncClient, auth_headers: dict, job):
    resume_id = await _generate(client, auth_headers, job.id, "resume")
    resp = await client.post(
        "/api/v1/jobs/materials", json={"jobId": 9999, "resume_artifact_id": resume_id}, headers=auth_headers
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_job_of_another_user(client: AsyncClient, auth_headers: dict, job, other_job):
    resume_id = await _generate(client, auth_headers, job.id, "resume")
    resp = await client.post(
        "/api/v1/jobs/materials", json={"jobId": other_job.id, "resume_artifact_id": resume_id}, headers=auth_headers
    )
    assert resp.status_code == 403
    assert resp.json()["code"] == "forbidden"


@pytest.mark.asyncio
async def test_wrong_artifact_kind(client: AsyncClient, auth_headers: dict, job):
    cover_id = await _generate(client, auth_headers, job.id, "cover-letter")
    resp = await client.post(
        "/api/v1/jobs/materials", json={"jobId": job.id, "resume_artifact_id": cover_id}, headers=auth_headers
    )
    assert resp.status_code == 400
    assert "kind=resume" in resp.json()["detail"]

    resume_id = await _generate(client, auth_headers, job.id, "resume")
    resp = await client.post(
        "/api/v1/jobs/materials", json={"jobId": job.id, "cover_artifact_id": resume_id}, headers=auth_headers
    )
    assert resp.status_code == 400
    assert "kind=cover_letter" in resp.json()["detail"]


@pytest.mark.asyncio
async def test_unknown_artifact(client: AsyncClient, auth_headers: dict, job):
    resp = await client.post(
        "/api/v1/jobs/materials",
        json={"jobId": job.id, "cover_artifact_id": str(uuid.uuid4())},
        headers=auth_headers,
    )
    assert resp.status_code == 404
    assert resp.json()["detail"] == "cover artifact not found"


@pytest.mark.asyncio
async def test_artifact_of_another_user(client: AsyncClient, auth_headers: dict, other_headers: dict, job, other_job):
    foreign_id = await _generate(client, other_headers, other_job.id, "resume")
    resp = await client.post(
        "/api/v1/jobs/materials", json={"jobId": job.id, "resume_artifact_id": foreign_id}, headers=auth_headers
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_list_is_owner_scoped(client: AsyncClient, auth_headers: dict, other_headers: dict, job):
    resume_id = await _generate(client, auth_headers, job.id, "resume")
    await client.post(
        "/api/v1/jobs/materials", json={"jobId": job.id, "resume_artifact_id": resume_id}, headers=auth_headers
    )

    resp = await client.get(f"/api/v1/jobs/{job.id}/materials", headers=other_headers)
    assert resp.status_code == 200
    assert resp.json()["items"] == []


@pytest.mark.asyncio
async def test_materials_require_auth(client: AsyncClient, job):
    resp = await client.get(f"/api/v1/jobs/{job.id}/materials")
    assert resp.status_code == 401
