"""Async controller that runs wizard side effects through ``ApiClient``.

Every outcome is fed back into ``reduce`` so the state stays the single
source of truth. A 401 from any call becomes ``AuthExpired``; other API
errors surface as ``message``.
"""

import logging
from typing import Awaitable, Callable, Optional, TypeVar

from seedcopy.client import ApiAuthError, ApiClient, ApiError
from seedcopy.schemas.intake import ComplianceResult, LibraryItem
from seedcopy.wizard.machine import (
    Action,
    AuthExpired,
    AuthRequired,
    AuthSucceeded,
    FeedbackSubmitted,
    GenerationFailed,
    GenerationStarted,
    GenerationSucceeded,
    Navigate,
    ShowMessage,
    SignedOut,
    reduce,
)
from seedcopy.wizard.state import WizardState, WizardStep, WizardUser

logger = logging.getLogger(__name__)

T = TypeVar("T")


class WizardSession:

    def __init__(self, api: ApiClient, state: WizardState | None = None):
        self.api = api
        self.state = state or WizardState()

    def dispatch(self, action: Action) -> WizardState:
        self.state = reduce(self.state, action)
        return self.state

    async def _call(self, call: Callable[[], Awaitable[T]]) -> Optional[T]:
        """Run an API call, folding auth and API errors into the state."""
        try:
            return await call()
        except ApiAuthError as e:
            logger.info(f"Session expired: {e.message}")
            self.dispatch(AuthExpired())
        except ApiError as e:
            self.dispatch(ShowMessage(e.message))
        return None

    def _ensure_auth(self) -> bool:
        if self.state.is_authenticated:
            return True
        self.dispatch(AuthRequired())
        return False

    # ── Auth ─────────────────────────────────────────────────

    def sign_in(self, user: WizardUser, access_token: str) -> WizardState:
        self.api.set_access_token(access_token)
        return self.dispatch(AuthSucceeded(user=user, access_token=access_token))

    async def sign_up(self, email: str, password: str, name: str) -> Optional[dict]:
        """Create an account. Signing in afterwards is the auth provider's job."""
        user = await self._call(lambda: self.api.signup(email, password, name))
        if user is not None:
            self.dispatch(ShowMessage("注册成功，请登录"))
        return user

    def sign_out(self) -> WizardState:
        self.api.set_access_token(None)
        return self.dispatch(SignedOut())

    # ── Generation ───────────────────────────────────────────

    async def submit(self) -> WizardState:
        was_generating = self.state.is_generating
        self.dispatch(GenerationStarted())
        if was_generating or not self.state.is_generating:
            return self.state

        state = self.state
        try:
            result = await self.api.generate_copy(
                product_name=state.product_name,
                selected_tags=list(state.selected_tags),
                content_type=state.content_type.value,
                target_audience=state.target_audience.value,
                writing_style=state.writing_style.value,
            )
        except ApiAuthError:
            return self.dispatch(AuthExpired())
        except ApiError as e:
            logger.warning(f"Generation failed: {e.message}")
            return self.dispatch(GenerationFailed(e.message))

        return self.dispatch(
            GenerationSucceeded(
                generation_id=result.generation_id,
                variants=tuple(result.content),
                notice=result.notice,
            )
        )

    # ── Results ──────────────────────────────────────────────

    async def submit_feedback(
        self, satisfaction: str, tags: list[str] | None = None, comment: str = ""
    ) -> bool:
        if not self._ensure_auth():
            return False
        generation_id = self.state.current_generation_id or "default"
        ok = await self._call(
            lambda: self.api.submit_feedback(generation_id, satisfaction, tags or [], comment)
        )
        if ok:
            self.dispatch(FeedbackSubmitted())
        return bool(ok)

    async def save_variant(self, content_id: int) -> bool:
        if not self._ensure_auth():
            return False
        if self.state.current_generation_id is None:
            self.dispatch(ShowMessage("请先生成文案再保存"))
            return False
        generation_id = self.state.current_generation_id
        ok = await self._call(lambda: self.api.save_to_library(generation_id, content_id))
        if ok:
            self.dispatch(ShowMessage("已保存到文案库"))
        return bool(ok)

    async def check_compliance(self) -> list[ComplianceResult]:
        if not self.state.has_results:
            return []
        texts = [variant.content for variant in self.state.generated_content]
        return await self._call(lambda: self.api.check_compliance(texts)) or []

    # ── Peripheral screens ───────────────────────────────────

    async def open_library(self) -> list[LibraryItem]:
        self.dispatch(Navigate(WizardStep.LIBRARY))
        if self.state.current_step != WizardStep.LIBRARY:
            return []
        return await self._call(self.api.get_library) or []

    async def analyze_style(self, training_text: str, account_tag: str = "") -> Optional[dict]:
        if not self._ensure_auth():
            return None
        return await self._call(lambda: self.api.analyze_style(training_text, account_tag))
