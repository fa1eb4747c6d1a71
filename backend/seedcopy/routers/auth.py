"""Auth routes.

Route overview:
  POST /signup  → {user}   creates the account with the auth provider and
                            seeds the user's profile

Sign-in itself happens against the provider directly; this service only
verifies its tokens.
"""

import logging

from fastapi import APIRouter, Depends

from seedcopy.auth.provider import AuthProvider, get_auth_provider
from seedcopy.schemas.intake import SignupRequest, UserOut
from seedcopy.services.profiles import create_profile
from seedcopy.utils.kv_store import KVStore, get_kv_store

logger = logging.getLogger(__name__)

router = APIRouter()


# ── POST /signup ─────────────────────────────────────────────

@router.post("/signup")
async def signup(
    body: SignupRequest,
    provider: AuthProvider = Depends(get_auth_provider),
    store: KVStore = Depends(get_kv_store),
):
    user = await provider.create_user(body.email, body.password, body.name)
    user_id = str(user["id"])
    logger.info("User created", extra={"user_id": user_id})

    # A missing profile only hides usage counters; don't fail the signup.
    try:
        await create_profile(store, user_id, body.email, body.name)
    except Exception:
        logger.exception("Failed to create profile for user %s", user_id)

    metadata = user.get("user_metadata") or {}
    return {
        "user": UserOut(
            id=user_id,
            email=user.get("email", body.email),
            name=metadata.get("name", body.name),
            created_at=user.get("created_at"),
        )
    }
