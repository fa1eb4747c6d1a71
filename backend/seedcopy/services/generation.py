"""Copy generation: prompt → AI call → parse → pad/fallback → persist.

Availability wins over fidelity here. As long as the caller is
authenticated and the request validated, ``generate_copy`` returns three
variants: an AI failure is replaced by the static fallback set and a
storage failure is logged, never raised.
"""

import logging
from dataclasses import dataclass

from seedcopy.auth.deps import CurrentUser
from seedcopy.schemas.copy import CopyVariant, GenerateRequest
from seedcopy.services.ai_client import AICompletionClient, AICompletionError
from seedcopy.services.parsing import pad_variants, parse_variants
from seedcopy.services.profiles import TOTAL_GENERATIONS, increment_stat
from seedcopy.services.prompts import build_system_prompt, build_user_prompt
from seedcopy.services.templates import FALLBACK_VARIANTS, render
from seedcopy.utils.kv_store import KVStore
from seedcopy.utils.records import GENERATION, insert_unique, now_ms, utcnow_iso

logger = logging.getLogger(__name__)

FALLBACK_NOTICE = "AI服务暂时不可用，已使用备用模板生成"


@dataclass
class GenerationResult:
    generation_id: str
    variants: list[CopyVariant]
    fallback_used: bool


def fallback_variants(request: GenerateRequest) -> list[CopyVariant]:
    return [
        CopyVariant(
            id=index,
            title=template["title"],
            content=render(template["content"], request.product_name),
            tags=list(request.selected_tags),
            compliance=template["compliance"],
            style=request.writing_style,
        )
        for index, template in enumerate(FALLBACK_VARIANTS, start=1)
    ]


async def _ask_ai(
    request: GenerateRequest,
    ai_client: AICompletionClient,
) -> list[CopyVariant]:
    system_prompt = build_system_prompt(
        request.content_type, request.target_audience, request.writing_style
    )
    user_prompt = build_user_prompt(request.product_name, request.selected_tags)

    reply = await ai_client.complete(system_prompt, user_prompt)
    parsed = parse_variants(reply)
    return pad_variants(
        parsed,
        product_name=request.product_name,
        tags=request.selected_tags,
        style=request.writing_style,
    )


async def _persist(
    store: KVStore,
    user: CurrentUser,
    request: GenerateRequest,
    variants: list[CopyVariant],
    fallback_used: bool,
) -> str:
    def build(key: str) -> dict:
        return {
            "id": key,
            "user_id": user.id,
            "product_name": request.product_name,
            "selected_tags": request.selected_tags,
            "content_type": request.content_type.value,
            "target_audience": request.target_audience.value,
            "writing_style": request.writing_style.value,
            "generated_content": [v.model_dump(mode="json") for v in variants],
            "fallback_used": fallback_used,
            "created_at": utcnow_iso(),
        }

    try:
        return await insert_unique(store, GENERATION, user.id, build)
    except Exception:
        logger.exception("Failed to persist generation record for user %s", user.id)
        return f"{GENERATION}:{user.id}:{now_ms()}"


async def generate_copy(
    request: GenerateRequest,
    user: CurrentUser,
    store: KVStore,
    ai_client: AICompletionClient,
) -> GenerationResult:
    logger.info(
        "Generation request",
        extra={
            "user_id": user.id,
            "content_type": request.content_type.value,
            "target_audience": request.target_audience.value,
            "writing_style": request.writing_style.value,
        },
    )

    fallback_used = False
    try:
        variants = await _ask_ai(request, ai_client)
    except AICompletionError as e:
        logger.warning(f"AI generation failed, using fallback templates: {e.details}")
        variants = fallback_variants(request)
        fallback_used = True

    generation_id = await _persist(store, user, request, variants, fallback_used)
    await increment_stat(store, user.id, TOTAL_GENERATIONS)

    return GenerationResult(
        generation_id=generation_id,
        variants=variants,
        fallback_used=fallback_used,
    )
