"""Schemas for the intake endpoints: library, feedback, style training,
profile and compliance review."""

from enum import Enum

from pydantic import BaseModel, EmailStr, Field, field_validator

from seedcopy.schemas.copy import ComplianceGrade


def _not_blank(value: str, field: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{field} must not be empty")
    return value


# ── Auth ─────────────────────────────────────────────────────

class SignupRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    name: str = Field(max_length=100)

    @field_validator("name")
    @classmethod
    def _name(cls, value: str) -> str:
        return _not_blank(value, "name")


class UserOut(BaseModel):
    id: str
    email: str
    name: str | None = None
    created_at: str | None = None


# ── Library ─────────────────────────────────────────────────

class LibraryItem(BaseModel):
    id: str
    title: str
    style: str
    type: str
    date: str
    compliance: ComplianceGrade
    fallback_used: bool = False
    published: bool = False
    saved: bool = True
    preview: str


class SaveRequest(BaseModel):
    generation_id: str = Field(min_length=1)
    content_id: int = Field(ge=1, le=3)


# ── Feedback ────────────────────────────────────────────────

class Satisfaction(str, Enum):
    LOVE = "love"
    LIKE = "like"
    OK = "ok"
    DISLIKE = "dislike"


class FeedbackRequest(BaseModel):
    generation_id: str = "default"
    satisfaction: Satisfaction
    tags: list[str] = Field(default_factory=list, max_length=20)
    comment: str = Field(default="", max_length=2000)


# ── Style training ──────────────────────────────────────────

class StyleAnalyzeRequest(BaseModel):
    training_text: str = Field(max_length=10000)
    account_tag: str = Field(default="", max_length=100)

    @field_validator("training_text")
    @classmethod
    def _text(cls, value: str) -> str:
        return _not_blank(value, "training_text")


# ── Profile ─────────────────────────────────────────────────

class ProfileUpdate(BaseModel):
    """Only user-editable fields; identity and counters are server-owned."""
    name: str | None = Field(default=None, max_length=100)
    style_preferences: dict | None = None

    model_config = {"extra": "forbid"}


# ── Compliance review ───────────────────────────────────────

class ComplianceCheckRequest(BaseModel):
    texts: list[str] = Field(min_length=1, max_length=10)


class ComplianceIssue(BaseModel):
    text: str
    suggestion: str
    count: int


class ComplianceResult(BaseModel):
    index: int
    score: int
    grade: ComplianceGrade
    issues: list[ComplianceIssue]
