"""Feedback intake: append the record, then bump the user's counter."""

import logging

from seedcopy.auth.deps import CurrentUser
from seedcopy.schemas.intake import FeedbackRequest
from seedcopy.services.profiles import TOTAL_FEEDBACK, increment_stat
from seedcopy.utils.kv_store import KVStore
from seedcopy.utils.records import FEEDBACK, insert_unique, utcnow_iso

logger = logging.getLogger(__name__)


async def submit_feedback(
    store: KVStore,
    user: CurrentUser,
    body: FeedbackRequest,
) -> str:
    feedback_id = await insert_unique(
        store,
        FEEDBACK,
        user.id,
        lambda key: {
            "id": key,
            "user_id": user.id,
            "generation_id": body.generation_id,
            "satisfaction": body.satisfaction.value,
            "tags": body.tags,
            "comment": body.comment,
            "created_at": utcnow_iso(),
        },
    )
    logger.info(
        "Feedback recorded",
        extra={"user_id": user.id, "satisfaction": body.satisfaction.value},
    )
    await increment_stat(store, user.id, TOTAL_FEEDBACK)
    return feedback_id
