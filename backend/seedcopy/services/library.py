"""The user's copy library: past generations and saved variants."""

from seedcopy.auth.deps import CurrentUser
from seedcopy.middleware.exceptions import ResourceNotFoundError
from seedcopy.schemas.intake import LibraryItem, SaveRequest
from seedcopy.utils.kv_store import KVStore
from seedcopy.utils.records import GENERATION, SAVED, insert_unique, user_prefix, utcnow_iso

PREVIEW_CHARS = 50


def summarize(record: dict) -> LibraryItem:
    variants = record.get("generated_content") or []
    first = variants[0] if variants else {}
    preview = first.get("content", "")
    return LibraryItem(
        id=record["id"],
        title=f"{record['product_name']} - {record['content_type']}",
        style=record["writing_style"],
        type=record["content_type"],
        date=record["created_at"].split("T")[0],
        compliance=first.get("compliance", "A"),
        fallback_used=bool(record.get("fallback_used", False)),
        preview=f"{preview[:PREVIEW_CHARS]}..." if preview else "...",
    )


async def list_library(store: KVStore, user: CurrentUser) -> list[LibraryItem]:
    """Newest first. A user with no generations gets an empty list."""
    records = await store.get_by_prefix(user_prefix(GENERATION, user.id))
    records.sort(key=lambda pair: (pair[1].get("created_at", ""), pair[0]), reverse=True)
    return [summarize(record) for _, record in records]


async def save_to_library(store: KVStore, user: CurrentUser, body: SaveRequest) -> str:
    if not body.generation_id.startswith(user_prefix(GENERATION, user.id)):
        raise ResourceNotFoundError("Generation", body.generation_id)
    if await store.get(body.generation_id) is None:
        raise ResourceNotFoundError("Generation", body.generation_id)

    return await insert_unique(
        store,
        SAVED,
        user.id,
        lambda key: {
            "id": key,
            "user_id": user.id,
            "generation_id": body.generation_id,
            "content_id": body.content_id,
            "saved_at": utcnow_iso(),
        },
    )
