"""
Reviews API — /media/{media_id}/reviews
───────────────────────────────────────
Reviews nested under a media entry.

Endpoints:
  GET    /media/{media_id}/reviews               — Reviews for an entry
  GET    /media/{media_id}/reviews/{review_id}   — Single review
  POST   /media/{media_id}/reviews               — Add review (rate, comment required)
  PUT    /media/{media_id}/reviews/{review_id}   — Merge-update review
  DELETE /media/{media_id}/reviews/{review_id}   — Remove review

Mutations respond with the full collection.
"""
from typing import Any

from fastapi import APIRouter, Body, Depends, status

from media_catalog.deps.storage import get_record_store
from media_catalog.schemas.media import MediaEntry, Review
from media_catalog.services.media_service import (
    add_review,
    get_review,
    list_reviews,
    remove_review,
    update_review,
)
from media_catalog.services.record_store import JsonRecordStore

router = APIRouter()


@router.get("/{media_id}/reviews", response_model=list[Review], response_model_exclude_unset=True)
def get_entry_reviews(media_id: str, store: JsonRecordStore = Depends(get_record_store)) -> list[Review]:
    return list_reviews(store.load(), media_id)


@router.get(
    "/{media_id}/reviews/{review_id}",
    response_model=Review,
    response_model_exclude_unset=True,
)
def get_entry_review(
    media_id: str,
    review_id: str,
    store: JsonRecordStore = Depends(get_record_store),
) -> Review:
    return get_review(store.load(), media_id, review_id)


@router.post(
    "/{media_id}/reviews",
    response_model=list[MediaEntry],
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
def create_entry_review(
    media_id: str,
    payload: dict[str, Any] | None = Body(None),
    store: JsonRecordStore = Depends(get_record_store),
) -> list[MediaEntry]:
    collection, _ = add_review(store.load(), media_id, payload or {})
    store.save(collection)
    return collection


@router.put(
    "/{media_id}/reviews/{review_id}",
    response_model=list[MediaEntry],
    response_model_exclude_unset=True,
)
def update_entry_review(
    media_id: str,
    review_id: str,
    payload: dict[str, Any] | None = Body(None),
    store: JsonRecordStore = Depends(get_record_store),
) -> list[MediaEntry]:
    collection, _ = update_review(store.load(), media_id, review_id, payload or {})
    store.save(collection)
    return collection


@router.delete(
    "/{media_id}/reviews/{review_id}",
    response_model=list[MediaEntry],
    response_model_exclude_unset=True,
)
def delete_entry_review(
    media_id: str,
    review_id: str,
    store: JsonRecordStore = Depends(get_record_store),
) -> list[MediaEntry]:
    collection = remove_review(store.load(), media_id, review_id)
    store.save(collection)
    return collection
