"""Health endpoint and middleware tests."""

import pytest
from httpx import AsyncClient

from conftest import API
from seedcopy.utils.kv_store import MemoryKVStore


class DownStore(MemoryKVStore):
    async def ping(self) -> bool:
        raise ConnectionError("connection refused")


@pytest.mark.api
@pytest.mark.asyncio
class TestHealth:

    async def test_health(self, client: AsyncClient):
        resp = await client.get(f"{API}/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert data["ai_service"] == "zhipu-ai"
        assert set(data["env_check"]) >= {"baas_url", "ai_api_key", "kv_backend"}
        assert all(
            isinstance(value, bool)
            for key, value in data["env_check"].items()
            if key != "kv_backend"
        )

    async def test_ready(self, client: AsyncClient):
        resp = await client.get(f"{API}/health/ready")
        assert resp.status_code == 200
        assert resp.json()["checks"] == {"service": "ok", "kv_store": "ok"}

    async def test_security_headers(self, client: AsyncClient):
        resp = await client.get(f"{API}/health")
        assert resp.headers["x-content-type-options"] == "nosniff"
        assert resp.headers["x-frame-options"] == "DENY"
        assert resp.headers["cache-control"] == "no-store"

    async def test_unknown_route_uses_error_shape(self, client: AsyncClient):
        resp = await client.get(f"{API}/nope")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Not Found"}


@pytest.mark.api
@pytest.mark.asyncio
class TestReadinessFailure:

    @pytest.fixture
    def store(self) -> MemoryKVStore:
        return DownStore()

    async def test_store_down(self, client: AsyncClient):
        resp = await client.get(f"{API}/health/ready")
        assert resp.status_code == 503
        data = resp.json()
        assert data["status"] == "unhealthy"
        assert data["checks"]["kv_store"].startswith("error: connection refused")
