"""
Required-field checks for request payloads.

Each operation declares the keys it needs; a single generic check
interprets the declaration. Only presence is checked, never content.
"""
from typing import Any

MEDIA_REQUIRED_FIELDS = ("Title", "Year", "Type")
REVIEW_REQUIRED_FIELDS = ("rate", "comment")


class MissingFieldsError(Exception):
    """Raised when a payload lacks one or more required fields."""

    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        super().__init__(f"Missing required fields: {', '.join(fields)}")

    @property
    def details(self) -> list[dict[str, str]]:
        """Per-field messages, e.g. ``{"field": "Year", "message": "Year is required!"}``."""
        return [
            {"field": name, "message": f"{name[:1].upper()}{name[1:]} is required!"}
            for name in self.fields
        ]


def require_fields(payload: dict[str, Any], required: tuple[str, ...]) -> None:
    """Raise MissingFieldsError listing every key of *required* absent from *payload*."""
    missing = [name for name in required if name not in payload]
    if missing:
        raise MissingFieldsError(missing)
