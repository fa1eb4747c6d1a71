"""Pytest configuration and fixtures for SeedCopy tests.

The app runs against an in-memory key-value store; the AI provider and the
auth provider are replaced with ``httpx.MockTransport`` fakes whose replies
each test can adjust.
"""

import json
from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from seedcopy.auth.jwt import create_access_token
from seedcopy.auth.provider import AuthProvider, get_auth_provider
from seedcopy.main import app
from seedcopy.services.ai_client import AICompletionClient, get_ai_client
from seedcopy.services.profiles import create_profile
from seedcopy.utils.kv_store import MemoryKVStore, get_kv_store

USER_ID = "user-123"
USER_EMAIL = "user@example.com"
USER_NAME = "Test User"

API = "/api/copy"


# ── Fake upstreams ───────────────────────────────────────────────

class FakeAIProvider:
    """Chat-completions endpoint double. Set ``reply``, ``status`` or
    ``timeout`` before the call; inspect ``calls`` afterwards."""

    def __init__(self):
        self.reply: str = json.dumps(
            [
                {"title": "情感版", "content": "第一版文案内容"},
                {"title": "专业版", "content": "第二版文案内容"},
                {"title": "轻松版", "content": "第三版文案内容"},
            ],
            ensure_ascii=False,
        )
        self.status = 200
        self.timeout = False
        self.calls: list[dict] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(json.loads(request.content))
        if self.timeout:
            raise httpx.ReadTimeout("timed out", request=request)
        if self.status >= 400:
            return httpx.Response(self.status, json={"error": "upstream failure"})
        return httpx.Response(
            200,
            json={"choices": [{"message": {"role": "assistant", "content": self.reply}}]},
        )


class FakeAuthProvider:
    """Admin user-creation endpoint double."""

    def __init__(self):
        self.status = 200
        self.body: dict | None = None
        self.calls: list[dict] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.calls.append({"headers": dict(request.headers), "json": payload})
        if self.body is not None:
            return httpx.Response(self.status, json=self.body)
        return httpx.Response(
            200,
            json={
                "id": "new-user-1",
                "email": payload["email"],
                "user_metadata": payload["user_metadata"],
                "created_at": "2026-01-01T00:00:00Z",
            },
        )


# ── Store / upstream fixtures ────────────────────────────────────

@pytest.fixture
def store() -> MemoryKVStore:
    return MemoryKVStore()


@pytest.fixture
def ai_provider() -> FakeAIProvider:
    return FakeAIProvider()


@pytest.fixture
def auth_provider() -> FakeAuthProvider:
    return FakeAuthProvider()


@pytest_asyncio.fixture
async def ai_client(ai_provider: FakeAIProvider) -> AsyncGenerator[AICompletionClient, None]:
    client = AICompletionClient(
        api_key="test-ai-key",
        base_url="http://ai.test/v4",
        model="glm-4-plus",
        transport=httpx.MockTransport(ai_provider.handler),
    )
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def provider(auth_provider: FakeAuthProvider) -> AsyncGenerator[AuthProvider, None]:
    client = AuthProvider(
        "http://baas.test",
        "test-service-key",
        transport=httpx.MockTransport(auth_provider.handler),
    )
    yield client
    await client.aclose()


@pytest.fixture
def app_overrides(store, ai_client, provider):
    """Point the app's dependencies at the test doubles."""
    app.dependency_overrides[get_kv_store] = lambda: store
    app.dependency_overrides[get_ai_client] = lambda: ai_client
    app.dependency_overrides[get_auth_provider] = lambda: provider
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app_overrides) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client wired straight into the ASGI app."""
    async with AsyncClient(transport=ASGITransport(app=app_overrides), base_url="http://test") as c:
        yield c


# ── Auth fixtures ────────────────────────────────────────────────

@pytest.fixture
def test_token() -> str:
    return create_access_token(user_id=USER_ID, email=USER_EMAIL, name=USER_NAME)


@pytest.fixture
def auth_headers(test_token: str) -> dict:
    return {"Authorization": f"Bearer {test_token}"}


@pytest_asyncio.fixture
async def test_profile(store: MemoryKVStore) -> dict:
    return await create_profile(store, USER_ID, USER_EMAIL, USER_NAME)


@pytest.fixture
def generate_body() -> dict:
    return {
        "productName": "保湿精华",
        "selectedTags": ["moisturizing"],
        "contentType": "single",
        "targetAudience": "gen-z",
        "writingStyle": "emotional",
    }


# ── Test Markers ─────────────────────────────────────────────────

def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "api: HTTP endpoint tests")
    config.addinivalue_line("markers", "wizard: Wizard state machine tests")
    config.addinivalue_line("markers", "integration: Integration tests")
