from fastapi import APIRouter, Depends

from seedcopy.auth.deps import CurrentUser, get_current_user
from seedcopy.schemas.intake import FeedbackRequest
from seedcopy.services.feedback import submit_feedback
from seedcopy.utils.kv_store import KVStore, get_kv_store

router = APIRouter()


@router.post("/feedback")
async def feedback(
    body: FeedbackRequest,
    user: CurrentUser = Depends(get_current_user),
    store: KVStore = Depends(get_kv_store),
):
    await submit_feedback(store, user, body)
    return {"success": True}
