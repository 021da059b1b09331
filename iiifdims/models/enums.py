"""Enum types for models."""

from enum import Enum


class MediaBundle(str, Enum):
    """Media type enum."""

    IMAGE = "image"
    FILE = "file"
    DOCUMENT = "document"
    AUDIO = "audio"
    VIDEO = "video"
    EXTRACTED_TEXT = "extracted_text"


class EntityOperation(str, Enum):
    """Operations an access check can be asked about."""

    VIEW = "view"
    UPDATE = "update"
    DELETE = "delete"


# Optional fields each bundle exposes on top of the base media columns.
BUNDLE_FIELDS: dict[MediaBundle, frozenset[str]] = {
    MediaBundle.IMAGE: frozenset({"width", "height"}),
    MediaBundle.FILE: frozenset({"width", "height"}),
    MediaBundle.DOCUMENT: frozenset(),
    MediaBundle.AUDIO: frozenset(),
    MediaBundle.VIDEO: frozenset(),
    MediaBundle.EXTRACTED_TEXT: frozenset(),
}
