"""Admin client for the BaaS auth provider.

Only user creation goes through the provider's HTTP API; token checks are
done locally in ``seedcopy.auth.jwt``.
"""

import logging
from typing import Optional

import httpx

from seedcopy.config import settings
from seedcopy.middleware.exceptions import UpstreamServiceError, ValidationFailedError

logger = logging.getLogger(__name__)


class AuthProvider:

    def __init__(
        self,
        base_url: str,
        service_key: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.service_key = service_key
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )

    async def create_user(self, email: str, password: str, name: str) -> dict:
        """Create a confirmed user (no email server is configured).

        Raises ValidationFailedError when the provider rejects the account
        (duplicate email, weak password) and UpstreamServiceError when the
        provider can't be reached.
        """
        if not self.service_key:
            raise UpstreamServiceError("Auth provider is not configured")

        try:
            response = await self._client.post(
                "/auth/v1/admin/users",
                json={
                    "email": email,
                    "password": password,
                    "user_metadata": {"name": name},
                    "email_confirm": True,
                },
                headers={
                    "apikey": self.service_key,
                    "Authorization": f"Bearer {self.service_key}",
                },
            )
        except httpx.HTTPError as e:
            logger.error(f"Auth provider unreachable: {e}")
            raise UpstreamServiceError("Auth provider unavailable", details=str(e)) from e

        if response.status_code >= 500:
            raise UpstreamServiceError(
                "Auth provider unavailable",
                details=f"status {response.status_code}",
            )
        if response.status_code >= 400:
            detail = _error_message(response)
            logger.warning(
                "Signup rejected by auth provider",
                extra={"status_code": response.status_code, "detail": detail},
            )
            raise ValidationFailedError("User creation failed", details=detail)

        data = response.json()
        return data.get("user", data)

    async def aclose(self) -> None:
        await self._client.aclose()


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict):
        for field in ("msg", "message", "error_description", "error"):
            if body.get(field):
                return str(body[field])
    return response.text


_provider: Optional[AuthProvider] = None


async def get_auth_provider() -> AuthProvider:
    global _provider
    if _provider is None:
        _provider = AuthProvider(settings.baas_url, settings.baas_service_key)
    return _provider


async def close_auth_provider():
    global _provider
    if _provider:
        await _provider.aclose()
        _provider = None
