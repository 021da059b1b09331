"""Copy IIIF image dimensions onto a node's original-file and JP2 media.

Source MIME types are compared case-insensitively with parameters such as
``; charset=binary`` dropped (RFC 2045), so ``Image/TIFF; charset=binary``
counts as ``image/tiff``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from iiifdims.actions.base import ActionBase, ActionDefinition, ServiceContainer
from iiifdims.actions.derivers import EntityChangedActionDeriver
from iiifdims.actions.manager import action_manager
from iiifdims.config import Config
from iiifdims.models import AccessResult, EntityOperation, Media, Node, User
from iiifdims.services.iiif import IiifInfo
from iiifdims.services.media import (
    get_media_referencing_node_and_term,
    get_source_file,
    get_term_for_uri,
    load_media,
    save_media,
)


@dataclass(frozen=True)
class MediaUseCategory:
    """Media tagged with ``term_uri`` whose source MIME type is looked up."""

    name: str
    term_uri: str
    mime_types: frozenset[str]


ORIGINAL_FILE = MediaUseCategory(
    name="Original File",
    term_uri="http://pcdm.org/use#OriginalFile",
    mime_types=frozenset({"image/tiff", "image/jp2"}),
)
JP2_FILE = MediaUseCategory(
    name="JP2 File",
    term_uri="https://jpeg.org/jpeg2000",
    mime_types=frozenset({"image/jp2"}),
)
DIMENSION_CATEGORIES: tuple[MediaUseCategory, ...] = (ORIGINAL_FILE, JP2_FILE)


def _normalize_mime(mime_type: str | None) -> str:
    if not mime_type:
        return ""
    return mime_type.split(";", 1)[0].strip().lower()


@action_manager.register(EntityChangedActionDeriver(entity_types=[Node.entity_type]))
class MediaAttributesFromIiif(ActionBase):
    """Add image dimensions retrieved from the IIIF server.

    For every media attached to the node as an original file or a JP2,
    the source file's MIME type decides whether the IIIF server is asked
    for its size. Media exposing both dimension fields get the values
    written and are saved one at a time; an error stops the run but
    leaves earlier saves in place.
    """

    plugin_id = "iiif:media_attributes_from_iiif_action"
    label = "Add image dimensions retrieved from the IIIF server"

    def __init__(
        self,
        configuration: dict[str, Any],
        plugin_id: str,
        definition: ActionDefinition,
        db: AsyncSession,
        iiif_info: IiifInfo,
        settings: Config,
        logger: logging.Logger,
    ) -> None:
        super().__init__(configuration, plugin_id, definition)
        self.db = db
        self.iiif_info = iiif_info
        self.logger = logger
        self.width_field = configuration.get("width_field", settings.MEDIA_WIDTH_FIELD)
        self.height_field = configuration.get(
            "height_field", settings.MEDIA_HEIGHT_FIELD
        )

    @classmethod
    def create(
        cls,
        container: ServiceContainer,
        configuration: dict[str, Any],
        plugin_id: str,
        definition: ActionDefinition,
    ) -> MediaAttributesFromIiif:
        return cls(
            configuration,
            plugin_id,
            definition,
            container.db,
            container.iiif_info,
            container.settings,
            container.logger,
        )

    async def execute(self, entity: Node) -> list[int]:
        """Update dimension fields; return the ids of media that were saved."""
        updated: list[int] = []
        for category in DIMENSION_CATEGORIES:
            term = await get_term_for_uri(self.db, category.term_uri)
            if term is None:
                self.logger.debug("No media use term for %s", category.term_uri)
            media_ids = await get_media_referencing_node_and_term(
                self.db, entity, term
            )
            # Usually at most one media per category, but nothing enforces it.
            for media_id in media_ids:
                media = await load_media(self.db, media_id)
                if await self._apply_dimensions(media, category):
                    updated.append(media.id)

        self.logger.info(
            "Node %s: updated dimensions on %d media %s",
            entity.id,
            len(updated),
            updated,
        )
        return updated

    async def _apply_dimensions(
        self, media: Media, category: MediaUseCategory
    ) -> bool:
        source = await get_source_file(self.db, media)
        mime_type = _normalize_mime(source.mime_type)
        if mime_type not in category.mime_types:
            self.logger.debug(
                "Skipping %s media %s: MIME type %r",
                category.name,
                media.id,
                source.mime_type,
            )
            return False

        width, height = await self.iiif_info.get_image_dimensions(source)

        has_fields = media.has_field(self.width_field) and media.has_field(
            self.height_field
        )
        if not has_fields:
            self.logger.debug(
                "Media %s (%s) has no %s/%s fields",
                media.id,
                media.bundle,
                self.width_field,
                self.height_field,
            )
            return False

        media.set(self.height_field, height)
        media.set(self.width_field, width)
        await save_media(self.db, media)
        return True

    def access(
        self,
        entity: Node,
        account: User | None = None,
        return_as_object: bool = False,
    ) -> bool | AccessResult:
        result = entity.access(EntityOperation.UPDATE.value, account)
        return result if return_as_object else result.is_allowed()
