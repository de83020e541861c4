"""
Media collection logic — entries and their nested reviews.

Every function takes the full collection as loaded from the record store
and returns a new list; the input list and its entries are never mutated.
Loading and saving is the caller's job.
"""
import uuid
from datetime import datetime, timezone
from typing import Any

from media_catalog.schemas.media import (
    ENTRY_PROTECTED_KEYS,
    REVIEW_PROTECTED_KEYS,
    MediaEntry,
    Review,
    without_protected,
)
from media_catalog.services.validation import (
    MEDIA_REQUIRED_FIELDS,
    REVIEW_REQUIRED_FIELDS,
    require_fields,
)

Collection = list[MediaEntry]


class NotFoundError(Exception):
    """Base for lookups that miss."""


class MediaNotFoundError(NotFoundError):
    """Raised when a media entry cannot be found."""


class ReviewNotFoundError(NotFoundError):
    """Raised when a review cannot be found on an existing entry."""


def _utcnow() -> str:
    """Current UTC time as stored in the data file, e.g. ``2021-03-05T10:00:00.123Z``."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _new_id(taken: set[str]) -> str:
    """Generate an id not present in *taken*."""
    while True:
        candidate = uuid.uuid4().hex
        if candidate not in taken:
            return candidate


def _index_of(collection: Collection, media_id: str) -> int:
    for index, entry in enumerate(collection):
        if entry.id == media_id:
            return index
    raise MediaNotFoundError(f"Media entry {media_id} not found")


def _review_index_of(entry: MediaEntry, review_id: str) -> int:
    for index, review in enumerate(entry.reviews):
        if review.id == review_id:
            return index
    raise ReviewNotFoundError(f"Review {review_id} not found on media entry {entry.id}")


def _replace_at(collection: Collection, index: int, entry: MediaEntry) -> Collection:
    return [*collection[:index], entry, *collection[index + 1:]]


# ── Entries ───────────────────────────────────────────────────────────────────

def list_media(collection: Collection, category: str | None = None) -> Collection:
    """All entries, or only those whose category equals *category*."""
    if not category:
        return list(collection)
    return [entry for entry in collection if entry.category == category]


def get_media(collection: Collection, media_id: str) -> MediaEntry:
    return collection[_index_of(collection, media_id)]


def create_media(collection: Collection, fields: dict[str, Any]) -> tuple[Collection, MediaEntry]:
    """
    Append a new entry built from *fields*.

    The id is generated, Poster starts empty, reviews start empty and both
    timestamps are set to now. Caller values for those keys are ignored.
    """
    require_fields(fields, MEDIA_REQUIRED_FIELDS)

    now = _utcnow()
    entry = MediaEntry.model_validate(
        {
            **without_protected(fields, ENTRY_PROTECTED_KEYS),
            "imdbID": _new_id({existing.id for existing in collection}),
            "Poster": "",
            "createdAt": now,
            "updatedAt": now,
            "reviews": [],
        }
    )
    return [*collection, entry], entry


def update_media(
    collection: Collection,
    media_id: str,
    fields: dict[str, Any],
) -> tuple[Collection, MediaEntry]:
    """Shallow-merge *fields* onto an entry, keeping its position."""
    require_fields(fields, MEDIA_REQUIRED_FIELDS)

    index = _index_of(collection, media_id)
    updated = collection[index].merged(fields).model_copy(update={"updated_at": _utcnow()})
    return _replace_at(collection, index, updated), updated


def remove_media(collection: Collection, media_id: str) -> Collection:
    _index_of(collection, media_id)
    return [entry for entry in collection if entry.id != media_id]


def set_poster(collection: Collection, media_id: str, url: str) -> Collection:
    """Record an uploaded poster URL; nothing else on the entry changes."""
    index = _index_of(collection, media_id)
    updated = collection[index].model_copy(update={"poster": url})
    return _replace_at(collection, index, updated)


# ── Reviews ───────────────────────────────────────────────────────────────────

def list_reviews(collection: Collection, media_id: str) -> list[Review]:
    return list(get_media(collection, media_id).reviews)


def get_review(collection: Collection, media_id: str, review_id: str) -> Review:
    entry = get_media(collection, media_id)
    return entry.reviews[_review_index_of(entry, review_id)]


def add_review(
    collection: Collection,
    media_id: str,
    fields: dict[str, Any],
) -> tuple[Collection, Review]:
    """Append a review with a generated id and createdAt to an entry."""
    require_fields(fields, REVIEW_REQUIRED_FIELDS)

    index = _index_of(collection, media_id)
    entry = collection[index]
    review = Review.model_validate(
        {
            **without_protected(fields, REVIEW_PROTECTED_KEYS),
            "_id": _new_id({existing.id for existing in entry.reviews}),
            "createdAt": _utcnow(),
        }
    )
    updated = entry.model_copy(update={"reviews": [*entry.reviews, review]})
    return _replace_at(collection, index, updated), review


def update_review(
    collection: Collection,
    media_id: str,
    review_id: str,
    fields: dict[str, Any],
) -> tuple[Collection, Review]:
    """Shallow-merge *fields* onto a review and stamp its updatedAt."""
    require_fields(fields, REVIEW_REQUIRED_FIELDS)

    index = _index_of(collection, media_id)
    entry = collection[index]
    review_index = _review_index_of(entry, review_id)
    review = entry.reviews[review_index].merged(fields).model_copy(
        update={"updated_at": _utcnow()}
    )
    reviews = [*entry.reviews[:review_index], review, *entry.reviews[review_index + 1:]]
    updated = entry.model_copy(update={"reviews": reviews})
    return _replace_at(collection, index, updated), review


def remove_review(collection: Collection, media_id: str, review_id: str) -> Collection:
    """
    Drop a review from an entry.

    An unknown entry raises MediaNotFoundError; an unknown review id on a
    known entry leaves the reviews as they were.
    """
    index = _index_of(collection, media_id)
    entry = collection[index]
    reviews = [review for review in entry.reviews if review.id != review_id]
    updated = entry.model_copy(update={"reviews": reviews})
    return _replace_at(collection, index, updated)
