"""Authentication tests: signup through the auth provider and bearer checks."""

from datetime import timedelta

import pytest
from httpx import AsyncClient
from jose import jwt

from conftest import API, USER_ID
from seedcopy.auth.jwt import create_access_token, decode_token
from seedcopy.config import settings


@pytest.mark.unit
class TestTokens:

    def test_round_trip_claims(self):
        token = create_access_token(USER_ID, "user@example.com", name="小红")
        payload = decode_token(token)
        assert payload["sub"] == USER_ID
        assert payload["aud"] == "authenticated"
        assert payload["user_metadata"] == {"name": "小红"}

    def test_expired_token(self):
        token = create_access_token(USER_ID, "user@example.com", expires_delta=timedelta(seconds=-1))
        assert decode_token(token) == {}

    def test_wrong_secret(self):
        token = jwt.encode(
            {"sub": USER_ID, "aud": "authenticated"}, "not-the-secret", algorithm="HS256"
        )
        assert decode_token(token) == {}

    def test_wrong_audience(self):
        token = jwt.encode(
            {"sub": USER_ID, "aud": "anon"}, settings.baas_jwt_secret, algorithm="HS256"
        )
        assert decode_token(token) == {}


@pytest.mark.api
@pytest.mark.asyncio
class TestSignup:

    async def test_signup_creates_user_and_profile(
        self, client: AsyncClient, auth_provider, store
    ):
        resp = await client.post(
            f"{API}/auth/signup",
            json={"email": "new@example.com", "password": "secret123", "name": "小红"},
        )
        assert resp.status_code == 200
        user = resp.json()["user"]
        assert user == {
            "id": "new-user-1",
            "email": "new@example.com",
            "name": "小红",
            "created_at": "2026-01-01T00:00:00Z",
        }

        call = auth_provider.calls[0]
        assert call["json"]["email_confirm"] is True
        assert call["json"]["user_metadata"] == {"name": "小红"}
        assert call["headers"]["apikey"] == "test-service-key"

        profile = await store.get("user_profile:new-user-1")
        assert profile["email"] == "new@example.com"
        assert profile["style_preferences"] == {}

    async def test_provider_rejects_signup(self, client: AsyncClient, auth_provider, store):
        auth_provider.status = 422
        auth_provider.body = {"msg": "A user with this email address has already been registered"}

        resp = await client.post(
            f"{API}/auth/signup",
            json={"email": "dup@example.com", "password": "secret123", "name": "Dup"},
        )
        assert resp.status_code == 400
        assert resp.json() == {
            "error": "User creation failed",
            "details": "A user with this email address has already been registered",
        }
        assert store.keys() == []

    async def test_provider_unavailable(self, client: AsyncClient, auth_provider):
        auth_provider.status = 500
        auth_provider.body = {"message": "boom"}

        resp = await client.post(
            f"{API}/auth/signup",
            json={"email": "new@example.com", "password": "secret123", "name": "小红"},
        )
        assert resp.status_code == 502

    @pytest.mark.parametrize(
        "body",
        [
            {"email": "not-an-email", "password": "secret123", "name": "x"},
            {"email": "new@example.com", "password": "123", "name": "x"},
            {"email": "new@example.com", "password": "secret123", "name": "  "},
            {"email": "new@example.com", "password": "secret123"},
        ],
    )
    async def test_invalid_signup_body(self, client: AsyncClient, auth_provider, body):
        resp = await client.post(f"{API}/auth/signup", json=body)
        assert resp.status_code == 400
        assert auth_provider.calls == []


@pytest.mark.api
@pytest.mark.asyncio
class TestBearerAuth:

    async def test_garbage_token(self, client: AsyncClient):
        resp = await client.get(f"{API}/library", headers={"Authorization": "Bearer garbage"})
        assert resp.status_code == 401
        assert resp.json()["error"] == "Authentication failed. Please sign in again."

    async def test_non_bearer_scheme(self, client: AsyncClient, test_token):
        resp = await client.get(f"{API}/library", headers={"Authorization": f"Basic {test_token}"})
        assert resp.status_code == 401

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/library"),
            ("POST", "/library/save"),
            ("POST", "/feedback"),
            ("POST", "/style/analyze"),
            ("GET", "/style/profile"),
            ("GET", "/profile"),
            ("PUT", "/profile"),
        ],
    )
    async def test_protected_routes(self, client: AsyncClient, method, path):
        resp = await client.request(method, f"{API}{path}", json={})
        assert resp.status_code == 401
