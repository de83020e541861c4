"""
Media entry and review records.

Field aliases are the keys used in the JSON data file and on the wire
(``imdbID``, ``Title``, ``Poster``, ``_id`` ...). Unknown keys supplied by
callers are kept on the record, so both models allow extras. Timestamps are
kept as the strings found in the file and are never reparsed.
"""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Keys a caller payload can never overwrite. Both the wire alias and the
# attribute name are listed so neither spelling slips through a merge.
ENTRY_PROTECTED_KEYS = frozenset({"imdbID", "id", "createdAt", "created_at", "reviews"})
REVIEW_PROTECTED_KEYS = frozenset({"_id", "id", "createdAt", "created_at"})
# Stamped by the collection service after every merge.
STAMPED_KEYS = frozenset({"updatedAt", "updated_at"})


def without_protected(fields: dict[str, Any], protected: frozenset[str]) -> dict[str, Any]:
    return {
        key: value
        for key, value in fields.items()
        if key not in protected and key not in STAMPED_KEYS
    }


class Review(BaseModel):
    """A single rating + comment nested under a media entry."""

    id: str = Field(alias="_id")
    rate: Any = None
    comment: Any = None
    created_at: Any = Field(default=None, alias="createdAt")
    updated_at: Any = Field(default=None, alias="updatedAt")

    model_config = ConfigDict(extra="allow")

    def merged(self, fields: dict[str, Any]) -> "Review":
        """Shallow-merge *fields* over this review, keeping id and createdAt."""
        data = self.model_dump(by_alias=True, exclude_unset=True)
        data.update(without_protected(fields, REVIEW_PROTECTED_KEYS))
        return Review.model_validate(data)


class MediaEntry(BaseModel):
    """One movie/show in the catalog."""

    id: str = Field(alias="imdbID")
    title: Any = Field(default=None, alias="Title")
    year: Any = Field(default=None, alias="Year")
    media_type: Any = Field(default=None, alias="Type")
    poster: Any = Field(default="", alias="Poster")
    category: Any = None
    created_at: Any = Field(default=None, alias="createdAt")
    updated_at: Any = Field(default=None, alias="updatedAt")
    reviews: list[Review] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow")

    def merged(self, fields: dict[str, Any]) -> "MediaEntry":
        """
        Shallow-merge *fields* over this entry.

        New keys overwrite old ones, except imdbID, createdAt and reviews
        which always keep their current values.
        """
        data = self.model_dump(by_alias=True, exclude_unset=True)
        data.update(without_protected(fields, ENTRY_PROTECTED_KEYS))
        return MediaEntry.model_validate(data)

    def to_record(self) -> dict[str, Any]:
        """Serialize to the JSON shape stored on disk."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)
