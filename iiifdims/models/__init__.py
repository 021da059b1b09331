"""Database models for iiifdims."""

from iiifdims.models.access import AccessResult
from iiifdims.models.associations import media_media_use
from iiifdims.models.base import Base
from iiifdims.models.enums import BUNDLE_FIELDS, EntityOperation, MediaBundle
from iiifdims.models.file import File
from iiifdims.models.media import Media, UnknownFieldError
from iiifdims.models.node import Node
from iiifdims.models.taxonomy import MEDIA_USE_VOCABULARY, TaxonomyTerm
from iiifdims.models.user import User

__all__ = [
    "AccessResult",
    "BUNDLE_FIELDS",
    "Base",
    "EntityOperation",
    "File",
    "MEDIA_USE_VOCABULARY",
    "Media",
    "MediaBundle",
    "Node",
    "TaxonomyTerm",
    "UnknownFieldError",
    "User",
    "media_media_use",
]
