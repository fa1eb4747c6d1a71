"""Copy generation endpoint tests."""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from conftest import API, USER_ID
from seedcopy.auth.jwt import create_access_token
from seedcopy.services.generation import FALLBACK_NOTICE
from seedcopy.utils.kv_store import MemoryKVStore


@pytest.mark.api
@pytest.mark.asyncio
class TestGenerate:
    """POST /generate."""

    async def test_returns_three_variants(
        self, client: AsyncClient, auth_headers, generate_body, store, ai_provider
    ):
        resp = await client.post(f"{API}/generate", headers=auth_headers, json=generate_body)
        assert resp.status_code == 200
        data = resp.json()

        assert "notice" not in data
        assert data["generation_id"].startswith(f"generation:{USER_ID}:")
        assert [v["id"] for v in data["content"]] == [1, 2, 3]
        assert [v["title"] for v in data["content"]] == ["情感版", "专业版", "轻松版"]
        for variant in data["content"]:
            assert variant["tags"] == ["moisturizing"]
            assert variant["compliance"] == "A"
            assert variant["style"] == "emotional"

        record = await store.get(data["generation_id"])
        assert record["fallback_used"] is False
        assert record["product_name"] == "保湿精华"
        assert record["content_type"] == "single"
        assert len(record["generated_content"]) == 3

    async def test_prompt_carries_request_fields(
        self, client: AsyncClient, auth_headers, generate_body, ai_provider
    ):
        await client.post(f"{API}/generate", headers=auth_headers, json=generate_body)

        assert len(ai_provider.calls) == 1
        call = ai_provider.calls[0]
        assert call["model"] == "glm-4-plus"
        system, user = call["messages"]
        assert system["role"] == "system"
        assert "保湿精华" in user["content"]
        assert "moisturizing" in user["content"]

    async def test_fallback_on_ai_error(
        self, client: AsyncClient, auth_headers, generate_body, store, ai_provider
    ):
        ai_provider.status = 500

        resp = await client.post(f"{API}/generate", headers=auth_headers, json=generate_body)
        assert resp.status_code == 200
        data = resp.json()

        assert data["notice"] == FALLBACK_NOTICE
        assert len(data["content"]) == 3
        assert [v["compliance"] for v in data["content"]] == ["A", "A", "B"]
        assert all("保湿精华" in v["content"] for v in data["content"])
        assert all(v["tags"] == ["moisturizing"] for v in data["content"])

        record = await store.get(data["generation_id"])
        assert record["fallback_used"] is True

    async def test_student_casual_fallback_scenario(
        self, client: AsyncClient, auth_headers, generate_body, store, ai_provider
    ):
        ai_provider.status = 503
        generate_body.update(targetAudience="student", writingStyle="casual")

        resp = await client.post(f"{API}/generate", headers=auth_headers, json=generate_body)
        content = resp.json()["content"]

        assert [v["title"] for v in content] == ["情感体验版", "专业分析版", "轻松种草版"]
        assert content[2]["compliance"] == "B"
        assert all(v["style"] == "casual" for v in content)
        record = await store.get(resp.json()["generation_id"])
        assert record["fallback_used"] is True
        assert record["target_audience"] == "student"

    async def test_fallback_on_timeout(
        self, client: AsyncClient, auth_headers, generate_body, ai_provider
    ):
        ai_provider.timeout = True

        resp = await client.post(f"{API}/generate", headers=auth_headers, json=generate_body)
        assert resp.status_code == 200
        assert resp.json()["notice"] == FALLBACK_NOTICE
        assert len(resp.json()["content"]) == 3

    async def test_fallback_on_empty_reply(
        self, client: AsyncClient, auth_headers, generate_body, ai_provider
    ):
        ai_provider.reply = "   "

        resp = await client.post(f"{API}/generate", headers=auth_headers, json=generate_body)
        assert resp.status_code == 200
        assert resp.json()["notice"] == FALLBACK_NOTICE

    async def test_marked_reply_is_padded(
        self, client: AsyncClient, auth_headers, generate_body, ai_provider
    ):
        ai_provider.reply = "版本一：清爽水润的第一篇\n\n版本二：成分党的第二篇"

        resp = await client.post(f"{API}/generate", headers=auth_headers, json=generate_body)
        content = resp.json()["content"]

        assert [v["title"] for v in content] == ["版本1", "版本2", "版本3"]
        assert content[0]["content"] == "清爽水润的第一篇"
        assert content[1]["content"] == "成分党的第二篇"
        assert "保湿精华" in content[2]["content"]
        assert all(v["compliance"] == "A" for v in content)

    async def test_unstructured_reply_is_wrapped(
        self, client: AsyncClient, auth_headers, generate_body, ai_provider
    ):
        ai_provider.reply = "这是一段没有任何格式的文案"

        resp = await client.post(f"{API}/generate", headers=auth_headers, json=generate_body)
        content = resp.json()["content"]

        assert "notice" not in resp.json()
        assert content[0]["title"] == "AI生成版本"
        assert content[0]["content"] == "这是一段没有任何格式的文案"
        assert len(content) == 3

    async def test_counts_generation_on_profile(
        self, client: AsyncClient, auth_headers, generate_body, test_profile
    ):
        await client.post(f"{API}/generate", headers=auth_headers, json=generate_body)
        await client.post(f"{API}/generate", headers=auth_headers, json=generate_body)

        resp = await client.get(f"{API}/profile", headers=auth_headers)
        assert resp.json()["profile"]["usage_stats"]["total_generations"] == 2

    async def test_records_never_overwrite(
        self, client: AsyncClient, auth_headers, generate_body, store
    ):
        ids = set()
        for _ in range(3):
            resp = await client.post(f"{API}/generate", headers=auth_headers, json=generate_body)
            ids.add(resp.json()["generation_id"])

        assert len(ids) == 3
        assert len([k for k in store.keys() if k.startswith("generation:")]) == 3


@pytest.mark.api
@pytest.mark.asyncio
class TestGenerateRejections:
    """Requests that never reach the AI provider."""

    async def test_missing_token(self, client: AsyncClient, generate_body, store, ai_provider):
        resp = await client.post(f"{API}/generate", json=generate_body)

        assert resp.status_code == 401
        assert resp.headers["www-authenticate"] == "Bearer"
        assert resp.json()["error"] == "Authentication required. Please sign in."
        assert store.keys() == []
        assert ai_provider.calls == []

    async def test_expired_token(self, client: AsyncClient, generate_body, ai_provider):
        token = create_access_token(USER_ID, "user@example.com", expires_delta=timedelta(minutes=-5))
        resp = await client.post(
            f"{API}/generate",
            headers={"Authorization": f"Bearer {token}"},
            json=generate_body,
        )

        assert resp.status_code == 401
        assert resp.json()["details"] == "Invalid or expired token"
        assert ai_provider.calls == []

    async def test_blank_product_name(
        self, client: AsyncClient, auth_headers, generate_body, store, ai_provider
    ):
        generate_body["productName"] = "   "

        resp = await client.post(f"{API}/generate", headers=auth_headers, json=generate_body)

        assert resp.status_code == 400
        assert resp.json()["error"] == "Validation error"
        assert "productName" in resp.json()["details"]
        assert ai_provider.calls == []
        assert store.keys() == []

    @pytest.mark.parametrize("field", ["contentType", "targetAudience", "writingStyle"])
    async def test_unknown_enum_value(
        self, client: AsyncClient, auth_headers, generate_body, ai_provider, field
    ):
        generate_body[field] = "not-a-choice"

        resp = await client.post(f"{API}/generate", headers=auth_headers, json=generate_body)

        assert resp.status_code == 400
        assert field in resp.json()["details"]
        assert ai_provider.calls == []

    async def test_missing_product_name(
        self, client: AsyncClient, auth_headers, generate_body, ai_provider
    ):
        del generate_body["productName"]

        resp = await client.post(f"{API}/generate", headers=auth_headers, json=generate_body)

        assert resp.status_code == 400
        assert ai_provider.calls == []

    async def test_missing_tags(self, client: AsyncClient, auth_headers, generate_body):
        del generate_body["selectedTags"]

        resp = await client.post(f"{API}/generate", headers=auth_headers, json=generate_body)
        assert resp.status_code == 400


class FailingStore(MemoryKVStore):
    async def add(self, key: str, value: dict) -> bool:
        raise ConnectionError("store unavailable")


@pytest.mark.api
@pytest.mark.asyncio
class TestGenerateStorageFailure:

    @pytest.fixture
    def store(self) -> MemoryKVStore:
        return FailingStore()

    async def test_still_returns_variants(self, client: AsyncClient, auth_headers, generate_body):
        resp = await client.post(f"{API}/generate", headers=auth_headers, json=generate_body)

        assert resp.status_code == 200
        assert len(resp.json()["content"]) == 3
        assert resp.json()["generation_id"].startswith(f"generation:{USER_ID}:")
