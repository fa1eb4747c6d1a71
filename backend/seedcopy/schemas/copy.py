"""Pydantic schemas for copy generation.

The request body keeps the camelCase field names the wizard sends
(``productName``, ``selectedTags`` ...); everything persisted or returned
uses snake_case.
"""

from enum import Enum

from pydantic import BaseModel, Field, field_validator

MAX_TAGS = 20
MAX_TAG_LENGTH = 30


class ContentType(str, Enum):
    SINGLE = "single"
    COLLECTION = "collection"
    REVIEW = "review"
    COMPARISON = "comparison"


class TargetAudience(str, Enum):
    GEN_Z = "gen-z"
    SENSITIVE_SKIN = "sensitive-skin"
    OFFICE_WORKER = "office-worker"
    STUDENT = "student"


class WritingStyle(str, Enum):
    EMOTIONAL = "emotional"
    PROFESSIONAL = "professional"
    CASUAL = "casual"
    SCIENTIFIC = "scientific"


class ComplianceGrade(str, Enum):
    A = "A"
    B = "B"
    C = "C"


# ── Variants ────────────────────────────────────────────────

class CopyVariant(BaseModel):
    id: int = Field(ge=1, le=3)
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    tags: list[str] = []
    compliance: ComplianceGrade = ComplianceGrade.A
    style: WritingStyle | None = None


# ── POST /generate ──────────────────────────────────────────

class GenerateRequest(BaseModel):
    product_name: str = Field(alias="productName", max_length=200)
    selected_tags: list[str] = Field(alias="selectedTags", max_length=MAX_TAGS)
    content_type: ContentType = Field(alias="contentType")
    target_audience: TargetAudience = Field(alias="targetAudience")
    writing_style: WritingStyle = Field(alias="writingStyle")

    model_config = {"populate_by_name": True, "extra": "forbid"}

    @field_validator("product_name")
    @classmethod
    def _product_name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("productName must not be empty")
        return value

    @field_validator("selected_tags")
    @classmethod
    def _clean_tags(cls, value: list[str]) -> list[str]:
        cleaned: list[str] = []
        for tag in value:
            tag = tag.strip()
            if not tag or len(tag) > MAX_TAG_LENGTH:
                raise ValueError(f"tags must be 1-{MAX_TAG_LENGTH} characters")
            if tag not in cleaned:
                cleaned.append(tag)
        return cleaned


class GenerateResponse(BaseModel):
    generation_id: str
    content: list[CopyVariant]
    notice: str | None = None
