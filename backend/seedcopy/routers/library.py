"""Copy library routes.

  GET  /library       → {library: [...]}  (newest first, [] when empty)
  POST /library/save  → {success: true}
"""

from fastapi import APIRouter, Depends

from seedcopy.auth.deps import CurrentUser, get_current_user
from seedcopy.schemas.intake import SaveRequest
from seedcopy.services.library import list_library, save_to_library
from seedcopy.utils.kv_store import KVStore, get_kv_store

router = APIRouter()


@router.get("/library")
async def get_library(
    user: CurrentUser = Depends(get_current_user),
    store: KVStore = Depends(get_kv_store),
):
    return {"library": await list_library(store, user)}


@router.post("/library/save")
async def save(
    body: SaveRequest,
    user: CurrentUser = Depends(get_current_user),
    store: KVStore = Depends(get_kv_store),
):
    await save_to_library(store, user, body)
    return {"success": True}
