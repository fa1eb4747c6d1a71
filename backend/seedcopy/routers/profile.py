"""Profile routes.

  GET /profile  → {profile}   404 if the profile was never created
  PUT /profile  → {profile}   only ``name`` and ``style_preferences`` are editable
"""

from fastapi import APIRouter, Depends

from seedcopy.auth.deps import CurrentUser, get_current_user
from seedcopy.schemas.intake import ProfileUpdate
from seedcopy.services.profiles import get_profile, update_profile
from seedcopy.utils.kv_store import KVStore, get_kv_store

router = APIRouter()


@router.get("/profile")
async def read_profile(
    user: CurrentUser = Depends(get_current_user),
    store: KVStore = Depends(get_kv_store),
):
    return {"profile": await get_profile(store, user.id)}


@router.put("/profile")
async def write_profile(
    body: ProfileUpdate,
    user: CurrentUser = Depends(get_current_user),
    store: KVStore = Depends(get_kv_store),
):
    return {"profile": await update_profile(store, user.id, body)}
