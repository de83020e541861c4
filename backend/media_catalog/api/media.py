"""
Media Service — /media
───────────────────────
Endpoints:
  GET    /media                — All entries (optional ?category= filter)
  GET    /media/{media_id}     — Single entry
  POST   /media                — Create entry (Title, Year, Type required)
  PUT    /media/{media_id}     — Merge-update entry, returns full collection
  DELETE /media/{media_id}     — Remove entry, returns remaining collection
  POST   /media/{media_id}/upload — Upload a poster image (field: med_image)

Each request loads the whole collection, works on it in memory and, when
something changed, saves the whole collection back. Errors propagate to
the handlers in core/errors.py.
"""
import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, File, Query, Response, UploadFile, status
from fastapi.concurrency import run_in_threadpool

from media_catalog.core.config import settings
from media_catalog.deps.storage import get_blob_store, get_record_store
from media_catalog.schemas.media import MediaEntry
from media_catalog.services.blob_store import CloudinaryBlobStore
from media_catalog.services.media_service import (
    create_media,
    get_media,
    list_media,
    remove_media,
    set_poster,
    update_media,
)
from media_catalog.services.record_store import JsonRecordStore

logger = logging.getLogger(__name__)

router = APIRouter()


# ── Routes ────────────────────────────────────────────────────────────────────

@router.get("", response_model=list[MediaEntry], response_model_exclude_unset=True)
def list_entries(
    category: str | None = Query(None, description="Only entries with this category"),
    store: JsonRecordStore = Depends(get_record_store),
) -> list[MediaEntry]:
    return list_media(store.load(), category)


@router.get("/{media_id}", response_model=MediaEntry, response_model_exclude_unset=True)
def get_entry(media_id: str, store: JsonRecordStore = Depends(get_record_store)) -> MediaEntry:
    return get_media(store.load(), media_id)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_entry(
    payload: dict[str, Any] | None = Body(None),
    store: JsonRecordStore = Depends(get_record_store),
) -> Response:
    """Create an entry. Responds 201 with an empty body."""
    collection, entry = create_media(store.load(), payload or {})
    store.save(collection)
    logger.info("Created media entry %s", entry.id)
    return Response(status_code=status.HTTP_201_CREATED)


@router.put("/{media_id}", response_model=list[MediaEntry], response_model_exclude_unset=True)
def update_entry(
    media_id: str,
    payload: dict[str, Any] | None = Body(None),
    store: JsonRecordStore = Depends(get_record_store),
) -> list[MediaEntry]:
    collection, _ = update_media(store.load(), media_id, payload or {})
    store.save(collection)
    return collection


@router.delete("/{media_id}", response_model=list[MediaEntry], response_model_exclude_unset=True)
def delete_entry(media_id: str, store: JsonRecordStore = Depends(get_record_store)) -> list[MediaEntry]:
    collection = remove_media(store.load(), media_id)
    store.save(collection)
    logger.info("Removed media entry %s", media_id)
    return collection


@router.post(
    "/{media_id}/upload",
    response_model=list[MediaEntry],
    response_model_exclude_unset=True,
)
async def upload_poster(
    media_id: str,
    med_image: UploadFile = File(...),
    store: JsonRecordStore = Depends(get_record_store),
    blob_store: CloudinaryBlobStore = Depends(get_blob_store),
) -> list[MediaEntry]:
    """
    Store the uploaded image in the blob store and record its URL as Poster.

    The entry is looked up before uploading so unknown ids never leave an
    orphaned file behind.
    """
    collection = await run_in_threadpool(store.load)
    get_media(collection, media_id)

    data = await med_image.read()
    url = await blob_store.store(data, med_image.filename or "poster", settings.UPLOAD_FOLDER)

    collection = set_poster(collection, media_id, url)
    await run_in_threadpool(store.save, collection)
    logger.info("Stored poster for media entry %s at %s", media_id, url)
    return collection
