"""
Storage dependencies — shared across the media and review routers.

Usage in any route:
    from media_catalog.deps.storage import get_record_store
    from media_catalog.services.record_store import JsonRecordStore

    @router.get("/items")
    def list_items(store: JsonRecordStore = Depends(get_record_store)):
        collection = store.load()
        ...

Tests swap either provider through ``app.dependency_overrides``.
"""
from media_catalog.core.config import settings
from media_catalog.services.blob_store import CloudinaryBlobStore
from media_catalog.services.record_store import JsonRecordStore


def get_record_store() -> JsonRecordStore:
    """Record store bound to the configured MEDIA_FILE."""
    return JsonRecordStore(settings.MEDIA_FILE)


def get_blob_store() -> CloudinaryBlobStore:
    """Cloudinary blob store built from the configured credentials."""
    return CloudinaryBlobStore()
