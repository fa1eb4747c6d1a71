"""Copy generation route.

  POST /generate  → {generation_id, content[3], notice?}

Always answers with three variants for a valid, authenticated request;
``notice`` is present only when the fallback templates were used.
"""

from fastapi import APIRouter, Depends

from seedcopy.auth.deps import CurrentUser, get_current_user
from seedcopy.schemas.copy import GenerateRequest, GenerateResponse
from seedcopy.services.ai_client import AICompletionClient, get_ai_client
from seedcopy.services.generation import FALLBACK_NOTICE, generate_copy
from seedcopy.utils.kv_store import KVStore, get_kv_store

router = APIRouter()


@router.post("/generate", response_model=GenerateResponse, response_model_exclude_none=True)
async def generate(
    body: GenerateRequest,
    user: CurrentUser = Depends(get_current_user),
    store: KVStore = Depends(get_kv_store),
    ai_client: AICompletionClient = Depends(get_ai_client),
):
    result = await generate_copy(body, user, store, ai_client)
    return GenerateResponse(
        generation_id=result.generation_id,
        content=result.variants,
        notice=FALLBACK_NOTICE if result.fallback_used else None,
    )
