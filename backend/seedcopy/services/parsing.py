"""Turn free-form AI output into copy variants.

The provider's output format is not guaranteed, so parsing runs three
tiers in order and stops at the first that yields anything:

  1. structured  JSON list of {title, content} objects, bare or inside a
                 ``` fence, or an object holding such a list
  2. heuristic   split on version markers (版本一 / 第二版 / Version 3 ...)
  3. wrapped     the whole reply as a single variant

``pad_variants`` then tops the list up to exactly three.
"""

import json
import logging
import re
from dataclasses import dataclass

from seedcopy.schemas.copy import ComplianceGrade, CopyVariant, WritingStyle
from seedcopy.services.prompts import VARIANT_COUNT
from seedcopy.services.templates import PADDING_CONTENT, PADDING_TITLE, render

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)
_VERSION_MARKER = re.compile(
    # Not followed by a digit or decimal part, so "版本2.0" in prose stays intact
    r"(?:版本\s*[一二三123]|第\s*[一二三123]\s*版|\bversion\s*[123])(?!\d|\.\d)",
    re.IGNORECASE,
)
_LIST_KEYS = ("variants", "versions", "content", "copies", "items")

WRAPPED_TITLE = "AI生成版本"


@dataclass
class ParsedVariant:
    title: str
    content: str


def _loads(text: str):
    candidates = [text.strip()]
    fenced = _FENCE.search(text)
    if fenced:
        candidates.insert(0, fenced.group(1).strip())
    for candidate in candidates:
        try:
            return json.loads(candidate)
        except ValueError:
            continue
    return None


def parse_structured(text: str) -> list[ParsedVariant]:
    data = _loads(text)
    if isinstance(data, dict):
        data = next(
            (data[key] for key in _LIST_KEYS if isinstance(data.get(key), list)),
            None,
        )
    if not isinstance(data, list):
        return []

    variants = []
    for item in data:
        if not isinstance(item, dict):
            continue
        title = str(item.get("title") or "").strip()
        content = str(item.get("content") or "").strip()
        if title and content:
            variants.append(ParsedVariant(title=title, content=content))
    return variants[:VARIANT_COUNT]


def parse_marked(text: str) -> list[ParsedVariant]:
    segments = _VERSION_MARKER.split(text)[1:]
    variants = []
    for segment in segments:
        lines = [line.strip() for line in segment.splitlines() if line.strip()]
        # Marker text is usually followed by a colon or dash on the same line.
        if lines:
            lines[0] = lines[0].lstrip("：:、.-— ").strip()
        content = "\n".join(line for line in lines if line)
        if content:
            variants.append(ParsedVariant(title="", content=content))
        if len(variants) == VARIANT_COUNT:
            break
    for index, variant in enumerate(variants, start=1):
        variant.title = PADDING_TITLE.format(index=index)
    return variants


def parse_variants(text: str) -> list[ParsedVariant]:
    """Apply the three parse tiers in order of precedence."""
    variants = parse_structured(text)
    if variants:
        logger.debug("AI reply parsed as structured JSON")
        return variants

    variants = parse_marked(text)
    if variants:
        logger.debug("AI reply split on version markers into %d part(s)", len(variants))
        return variants

    logger.debug("AI reply wrapped as a single variant")
    return [ParsedVariant(title=WRAPPED_TITLE, content=text.strip())]


def pad_variants(
    parsed: list[ParsedVariant],
    product_name: str,
    tags: list[str],
    style: WritingStyle,
) -> list[CopyVariant]:
    """Build exactly three graded variants, padding with the template copy."""
    variants = [
        CopyVariant(
            id=index,
            title=item.title,
            content=item.content,
            tags=list(tags),
            compliance=ComplianceGrade.A,
            style=style,
        )
        for index, item in enumerate(parsed[:VARIANT_COUNT], start=1)
    ]
    while len(variants) < VARIANT_COUNT:
        index = len(variants) + 1
        variants.append(
            CopyVariant(
                id=index,
                title=PADDING_TITLE.format(index=index),
                content=render(PADDING_CONTENT, product_name),
                tags=list(tags),
                compliance=ComplianceGrade.A,
                style=style,
            )
        )
    return variants
