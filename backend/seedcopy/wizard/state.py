"""Wizard state for the copy-generation flow.

``WizardState`` is frozen: every transition produces a new instance via
``model_copy(update=...)`` and sign-out replaces it with ``WizardState()``.
"""

from enum import Enum

from pydantic import BaseModel

from seedcopy.schemas.copy import ContentType, CopyVariant, TargetAudience, WritingStyle


class WizardStep(str, Enum):
    WELCOME = "welcome"
    PRODUCT_INPUT = "product-input"
    TYPE_SELECTION = "type-selection"
    STYLE_SELECTION = "style-selection"
    CONFIRMATION = "confirmation"
    RESULTS = "results"
    FEEDBACK = "feedback"
    COMPLIANCE = "compliance"
    LIBRARY = "library"
    TRAINING = "training"
    PROFILE = "profile"


# ── Step groups ─────────────────────────────────────────────

FORWARD_ORDER = (
    WizardStep.WELCOME,
    WizardStep.PRODUCT_INPUT,
    WizardStep.TYPE_SELECTION,
    WizardStep.STYLE_SELECTION,
    WizardStep.CONFIRMATION,
    WizardStep.RESULTS,
)

# Steps editable from the confirmation screen
INPUT_STEPS = (
    WizardStep.PRODUCT_INPUT,
    WizardStep.TYPE_SELECTION,
    WizardStep.STYLE_SELECTION,
)

RESULT_VIEWS = (WizardStep.FEEDBACK, WizardStep.COMPLIANCE)

PERIPHERAL_STEPS = (WizardStep.LIBRARY, WizardStep.TRAINING, WizardStep.PROFILE)

NAV_STEPS = (WizardStep.PRODUCT_INPUT,) + PERIPHERAL_STEPS

# Peripheral steps that need a signed-in user
AUTH_REQUIRED_STEPS = (WizardStep.LIBRARY, WizardStep.TRAINING)

BACKWARD = {
    WizardStep.PRODUCT_INPUT: WizardStep.WELCOME,
    WizardStep.TYPE_SELECTION: WizardStep.PRODUCT_INPUT,
    WizardStep.STYLE_SELECTION: WizardStep.TYPE_SELECTION,
    WizardStep.CONFIRMATION: WizardStep.STYLE_SELECTION,
    WizardStep.RESULTS: WizardStep.CONFIRMATION,
    WizardStep.FEEDBACK: WizardStep.RESULTS,
    WizardStep.COMPLIANCE: WizardStep.RESULTS,
    WizardStep.LIBRARY: WizardStep.PRODUCT_INPUT,
    WizardStep.TRAINING: WizardStep.PRODUCT_INPUT,
    WizardStep.PROFILE: WizardStep.PRODUCT_INPUT,
}


# ── Tag catalog ─────────────────────────────────────────────

TAG_CATALOG: dict[str, str] = {
    "antioxidant": "抗氧化",
    "repair": "修护",
    "refreshing": "清爽",
    "whitening": "美白",
    "anti-aging": "抗老",
    "moisturizing": "保湿",
}


class WizardUser(BaseModel):
    id: str
    email: str
    name: str | None = None

    model_config = {"frozen": True}


class WizardState(BaseModel):
    current_step: WizardStep = WizardStep.WELCOME
    product_name: str = ""
    selected_tags: tuple[str, ...] = ()
    content_type: ContentType | None = None
    target_audience: TargetAudience | None = None
    writing_style: WritingStyle | None = None
    generated_content: tuple[CopyVariant, ...] = ()
    current_generation_id: str | None = None
    user: WizardUser | None = None
    access_token: str | None = None

    show_auth_prompt: bool = False
    message: str | None = None
    is_generating: bool = False

    model_config = {"frozen": True}

    @property
    def is_authenticated(self) -> bool:
        return self.access_token is not None

    @property
    def nav_visible(self) -> bool:
        return self.current_step in NAV_STEPS

    @property
    def has_results(self) -> bool:
        return bool(self.generated_content)
