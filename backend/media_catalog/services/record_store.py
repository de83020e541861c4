"""
JSON file persistence for the media collection.

The whole collection is read on every load and rewritten on every save.
There is no locking: two requests that load the same snapshot and both
save will lose one of the updates (last writer wins).
"""
import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from media_catalog.schemas.media import MediaEntry

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the data file cannot be read, parsed or written."""


class JsonRecordStore:
    """Reads and writes the media collection as a single JSON array."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> list[MediaEntry]:
        """Return the persisted collection; a missing file is an empty one."""
        if not self.path.exists():
            return []
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                raw = json.load(handle)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise StorageError(f"Cannot read media file {self.path}") from exc

        if not isinstance(raw, list):
            raise StorageError(f"Media file {self.path} does not hold a list")
        try:
            return [MediaEntry.model_validate(record) for record in raw]
        except ValidationError as exc:
            raise StorageError(f"Media file {self.path} holds malformed records") from exc

    def save(self, collection: list[MediaEntry]) -> None:
        """
        Replace the persisted collection with *collection*.

        Writes to a temp file next to the target and renames it over the
        target, so a reader never sees a half-written file.
        """
        records = [entry.to_record() for entry in collection]
        tmp_path: Path | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_path = Path(handle.name)
                json.dump(records, handle, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            raise StorageError(f"Cannot write media file {self.path}") from exc
        logger.debug("Saved %d media entries to %s", len(records), self.path)
