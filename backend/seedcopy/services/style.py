"""Style training: analyse a sample of the user's own copy and keep it."""

import json
import logging

from seedcopy.auth.deps import CurrentUser
from seedcopy.schemas.intake import StyleAnalyzeRequest
from seedcopy.services.ai_client import AICompletionClient, AICompletionError
from seedcopy.services.prompts import STYLE_ANALYSIS_SYSTEM_PROMPT, build_style_prompt
from seedcopy.services.templates import DEFAULT_STYLE_ANALYSIS, FALLBACK_STYLE_ANALYSIS
from seedcopy.utils.kv_store import KVStore
from seedcopy.utils.records import TRAINING, insert_unique, user_prefix, utcnow_iso

logger = logging.getLogger(__name__)


async def _analyze(text: str, ai_client: AICompletionClient) -> dict:
    try:
        reply = await ai_client.complete(STYLE_ANALYSIS_SYSTEM_PROMPT, build_style_prompt(text))
    except AICompletionError as e:
        logger.warning(f"Style analysis AI error, using fallback: {e.details}")
        return {**FALLBACK_STYLE_ANALYSIS, "analyzed_at": utcnow_iso()}

    try:
        analysis = json.loads(reply)
    except ValueError:
        analysis = None
    if isinstance(analysis, dict):
        return analysis
    return {**DEFAULT_STYLE_ANALYSIS, "ai_analysis": reply}


async def analyze_style(
    store: KVStore,
    user: CurrentUser,
    body: StyleAnalyzeRequest,
    ai_client: AICompletionClient,
) -> dict:
    analysis = await _analyze(body.training_text, ai_client)
    await insert_unique(
        store,
        TRAINING,
        user.id,
        lambda key: {
            "id": key,
            "user_id": user.id,
            "training_text": body.training_text,
            "account_tag": body.account_tag,
            "analysis_result": analysis,
            "created_at": utcnow_iso(),
        },
    )
    return analysis


async def get_style_profile(store: KVStore, user: CurrentUser) -> dict:
    pairs = await store.get_by_prefix(user_prefix(TRAINING, user.id))
    pairs.sort(key=lambda pair: (pair[1].get("created_at", ""), pair[0]))
    sessions = [record for _, record in pairs]
    return {"training_sessions": sessions, "total_sessions": len(sessions)}
