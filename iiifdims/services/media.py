"""Entity lookups shared by media actions."""

from __future__ import annotations

import logging
from urllib.parse import quote

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from iiifdims.config import config
from iiifdims.models import File, Media, Node, TaxonomyTerm, media_media_use
from iiifdims.models.base import utcnow

logger = logging.getLogger("iiifdims.media")

PUBLIC_SCHEME = "public://"


class EntityNotFoundError(LookupError):
    """Raised when an entity id does not resolve to a stored row."""

    def __init__(self, entity_type: str, entity_id: int) -> None:
        super().__init__(f"{entity_type} {entity_id} not found")
        self.entity_type = entity_type
        self.entity_id = entity_id


class MediaSourceError(LookupError):
    """Raised when a media entity has no usable source file."""


async def get_term_for_uri(db: AsyncSession, uri: str) -> TaxonomyTerm | None:
    """Return the taxonomy term tagged with ``uri``, if any."""
    result = await db.execute(
        select(TaxonomyTerm).where(TaxonomyTerm.external_uri == uri)
    )
    return result.scalar_one_or_none()


async def get_media_referencing_node_and_term(
    db: AsyncSession, node: Node, term: TaxonomyTerm | None
) -> list[int]:
    """Ids of media attached to ``node`` and tagged with ``term``."""
    if term is None:
        return []

    result = await db.execute(
        select(Media.id)
        .join(media_media_use, media_media_use.c.media_id == Media.id)
        .where(
            Media.media_of_id == node.id,
            media_media_use.c.term_id == term.id,
        )
        .order_by(Media.id)
    )
    return list(result.scalars())


async def load_media(db: AsyncSession, media_id: int) -> Media:
    media = await db.get(Media, media_id)
    if media is None:
        raise EntityNotFoundError("media", media_id)
    return media


async def load_node(db: AsyncSession, node_id: int) -> Node:
    node = await db.get(Node, node_id)
    if node is None:
        raise EntityNotFoundError("node", node_id)
    return node


async def get_source_file(db: AsyncSession, media: Media) -> File:
    """Return the file a media entity wraps."""
    if media.file_id is None:
        raise MediaSourceError(f"Media {media.id} has no source file")

    source = await db.get(File, media.file_id)
    if source is None:
        raise MediaSourceError(
            f"Media {media.id} references missing file {media.file_id}"
        )
    return source


async def save_media(db: AsyncSession, media: Media) -> None:
    """Persist a media entity in its own transaction."""
    media.changed_at = utcnow()
    db.add(media)
    await db.commit()
    logger.debug("Saved media %s", media.id)


def create_url(file: File) -> str:
    """Absolute URL a remote server can fetch ``file`` from."""
    uri = file.uri
    if uri.startswith(("http://", "https://")):
        return uri
    if uri.startswith(PUBLIC_SCHEME):
        path = uri[len(PUBLIC_SCHEME) :]
        return f"{config.FILES_BASE_URL.rstrip('/')}/{quote(path, safe='/')}"
    raise MediaSourceError(f"File {file.id} has no public URL ({uri})")
