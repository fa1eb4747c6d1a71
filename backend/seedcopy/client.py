"""Typed HTTP client for the SeedCopy API.

Attaches the current bearer token (or the provider's anon key when signed
out) to every request and turns error responses into exceptions:

  ApiAuthError  401; the stored token is cleared and callers re-prompt login
  ApiError      any other non-2xx status, a network failure (status 0), or a
                2xx body that is not the JSON the endpoint promises

Usage:
    async with ApiClient("https://host/api/copy") as api:
        api.set_access_token(token)
        result = await api.generate_copy(...)
"""

import logging
from typing import Any, Callable, Optional

import httpx

from seedcopy.schemas.copy import GenerateResponse
from seedcopy.schemas.intake import ComplianceResult, LibraryItem

logger = logging.getLogger(__name__)


class ApiError(Exception):

    def __init__(self, status_code: int, message: str, details: str | None = None):
        self.status_code = status_code
        self.message = message
        self.details = details
        super().__init__(message)


class ApiAuthError(ApiError):
    pass


def _mask(token: str) -> str:
    return f"{token[:12]}..."


def _success(data: dict) -> bool:
    return bool(data.get("success"))


def _parse_error(response: httpx.Response) -> tuple[str, str | None]:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP error {response.status_code}", None

    if not isinstance(body, dict):
        return str(body), None
    error = body.get("error")
    if isinstance(error, dict):
        return str(error.get("message", error)), error.get("details")
    if error:
        return str(error), body.get("details")
    return str(body.get("detail", f"HTTP error {response.status_code}")), None


class ApiClient:

    def __init__(
        self,
        base_url: str,
        anon_key: str | None = None,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.anon_key = anon_key
        self._access_token: Optional[str] = None
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )

    @property
    def access_token(self) -> Optional[str]:
        return self._access_token

    def set_access_token(self, token: Optional[str]) -> None:
        self._access_token = token
        logger.debug("Access token updated: %s", _mask(token) if token else "None")

    async def _request(
        self,
        method: str,
        path: str,
        json: Any = None,
        parse: Callable[[Any], Any] | None = None,
    ) -> Any:
        headers = {}
        token = self._access_token or self.anon_key
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = await self._client.request(method, path, json=json, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"API request failed for {path}: {e}")
            raise ApiError(0, "Network error", details=str(e)) from e

        if response.is_success:
            try:
                data = response.json()
                return parse(data) if parse else data
            except (ValueError, KeyError, TypeError, AttributeError) as e:
                # ValidationError and JSONDecodeError are both ValueErrors
                logger.error(f"Invalid response body for {path}: {e}")
                raise ApiError(response.status_code, "Invalid response", details=str(e)) from e

        message, details = _parse_error(response)
        logger.warning(f"API error {response.status_code} for {path}: {message}")
        if response.status_code == 401:
            self.set_access_token(None)
            raise ApiAuthError(401, message, details)
        raise ApiError(response.status_code, message, details)

    # ── Auth ─────────────────────────────────────────────────

    async def signup(self, email: str, password: str, name: str) -> dict:
        return await self._request(
            "POST",
            "/auth/signup",
            {"email": email, "password": password, "name": name},
            parse=lambda data: dict(data["user"]),
        )

    # ── Copywriting ──────────────────────────────────────────

    async def generate_copy(
        self,
        product_name: str,
        selected_tags: list[str],
        content_type: str,
        target_audience: str,
        writing_style: str,
    ) -> GenerateResponse:
        return await self._request(
            "POST",
            "/generate",
            {
                "productName": product_name,
                "selectedTags": selected_tags,
                "contentType": content_type,
                "targetAudience": target_audience,
                "writingStyle": writing_style,
            },
            parse=GenerateResponse.model_validate,
        )

    async def get_library(self) -> list[LibraryItem]:
        return await self._request(
            "GET",
            "/library",
            parse=lambda data: [LibraryItem.model_validate(item) for item in data["library"]],
        )

    async def save_to_library(self, generation_id: str, content_id: int) -> bool:
        return await self._request(
            "POST",
            "/library/save",
            {"generation_id": generation_id, "content_id": content_id},
            parse=_success,
        )

    # ── Feedback ─────────────────────────────────────────────

    async def submit_feedback(
        self,
        generation_id: str,
        satisfaction: str,
        tags: list[str],
        comment: str,
    ) -> bool:
        return await self._request(
            "POST",
            "/feedback",
            {
                "generation_id": generation_id,
                "satisfaction": satisfaction,
                "tags": tags,
                "comment": comment,
            },
            parse=_success,
        )

    # ── Style training ───────────────────────────────────────

    async def analyze_style(self, training_text: str, account_tag: str = "") -> dict:
        return await self._request(
            "POST",
            "/style/analyze",
            {"training_text": training_text, "account_tag": account_tag},
            parse=lambda data: dict(data["analysis"]),
        )

    async def get_style_profile(self) -> dict:
        return await self._request("GET", "/style/profile", parse=dict)

    # ── Profile ──────────────────────────────────────────────

    async def get_profile(self) -> dict:
        return await self._request("GET", "/profile", parse=lambda data: dict(data["profile"]))

    async def update_profile(self, **updates: Any) -> dict:
        return await self._request(
            "PUT", "/profile", updates, parse=lambda data: dict(data["profile"])
        )

    # ── Compliance / health ──────────────────────────────────

    async def check_compliance(self, texts: list[str]) -> list[ComplianceResult]:
        return await self._request(
            "POST",
            "/compliance/check",
            {"texts": texts},
            parse=lambda data: [ComplianceResult.model_validate(item) for item in data["results"]],
        )

    async def health(self) -> dict:
        return await self._request("GET", "/health", parse=dict)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
