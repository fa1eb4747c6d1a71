"""User profiles and their usage counters.

The profile document lives at ``user_profile:{id}``; counters live in a
separate hash (``user_stats:{id}``) so increments are atomic and never race
with profile edits. ``get_profile`` merges the two.
"""

import logging

from seedcopy.middleware.exceptions import ResourceNotFoundError
from seedcopy.schemas.intake import ProfileUpdate
from seedcopy.utils.kv_store import KVStore
from seedcopy.utils.records import profile_key, stats_key, utcnow_iso

logger = logging.getLogger(__name__)

TOTAL_GENERATIONS = "total_generations"
TOTAL_FEEDBACK = "total_feedback"
COUNTERS = (TOTAL_GENERATIONS, TOTAL_FEEDBACK)


async def create_profile(store: KVStore, user_id: str, email: str, name: str) -> dict:
    profile = {
        "id": user_id,
        "email": email,
        "name": name,
        "created_at": utcnow_iso(),
        "style_preferences": {},
    }
    await store.set(profile_key(user_id), profile)
    return profile


async def get_profile(store: KVStore, user_id: str) -> dict:
    profile = await store.get(profile_key(user_id))
    if profile is None:
        raise ResourceNotFoundError("User profile", user_id)

    counters = await store.get_counters(stats_key(user_id))
    profile["usage_stats"] = {name: counters.get(name, 0) for name in COUNTERS}
    return profile


async def update_profile(store: KVStore, user_id: str, updates: ProfileUpdate) -> dict:
    profile = await store.get(profile_key(user_id))
    if profile is None:
        raise ResourceNotFoundError("User profile", user_id)

    profile.update(updates.model_dump(exclude_unset=True, exclude_none=True))
    profile["updated_at"] = utcnow_iso()
    await store.set(profile_key(user_id), profile)
    return await get_profile(store, user_id)


async def increment_stat(store: KVStore, user_id: str, counter: str) -> None:
    """Best-effort counter bump; failures are logged, never raised."""
    try:
        if await store.get(profile_key(user_id)) is None:
            logger.info("No profile for user %s; %s not counted", user_id, counter)
            return
        await store.increment(stats_key(user_id), counter)
    except Exception:
        logger.exception("Failed to update %s for user %s", counter, user_id)
