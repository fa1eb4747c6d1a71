"""Style training routes.

  POST /style/analyze  → {analysis}   (fallback analysis if the AI fails)
  GET  /style/profile  → {training_sessions, total_sessions}
"""

from fastapi import APIRouter, Depends

from seedcopy.auth.deps import CurrentUser, get_current_user
from seedcopy.schemas.intake import StyleAnalyzeRequest
from seedcopy.services.ai_client import AICompletionClient, get_ai_client
from seedcopy.services.style import analyze_style, get_style_profile
from seedcopy.utils.kv_store import KVStore, get_kv_store

router = APIRouter()


@router.post("/style/analyze")
async def analyze(
    body: StyleAnalyzeRequest,
    user: CurrentUser = Depends(get_current_user),
    store: KVStore = Depends(get_kv_store),
    ai_client: AICompletionClient = Depends(get_ai_client),
):
    return {"analysis": await analyze_style(store, user, body, ai_client)}


@router.get("/style/profile")
async def style_profile(
    user: CurrentUser = Depends(get_current_user),
    store: KVStore = Depends(get_kv_store),
):
    return await get_style_profile(store, user)
