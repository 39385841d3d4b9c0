"""Tests for GET /health and GET /metrics."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health_returns_200(async_client: AsyncClient):
    r = await async_client.get("/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "ok"
    assert "correlation_id" in data
    assert "environment" in data
    assert "version" in data


@pytest.mark.asyncio
async def test_metrics_count_committed_and_rejected(async_client: AsyncClient, manager_headers, vet_headers):
    body = {"tag_number": "KE-8", "breed": "Jersey", "date_of_birth": "2022-04-04", "gender": "female"}
    await async_client.post("/cattle/", json=body, headers=manager_headers)
    await async_client.post("/cattle/", json=body, headers=vet_headers)

    r = await async_client.get("/metrics")
    assert r.status_code == 200
    by_kind = r.json()["counters_by_kind"]
    assert by_kind["record_mutations_committed_total"]["record_mutations_committed_total:kind=cattle"] == 1
    assert by_kind["record_mutations_rejected_total"]["record_mutations_rejected_total:kind=cattle"] == 1
