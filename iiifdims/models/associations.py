"""Association tables for many-to-many relationships."""

from sqlalchemy import Column, ForeignKey, Table, UniqueConstraint

from iiifdims.models.base import Base

media_media_use: Table = Table(
    "media_media_use",
    Base.metadata,
    Column("media_id", ForeignKey("media.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "term_id",
        ForeignKey("taxonomy_terms.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    UniqueConstraint("media_id", "term_id", name="uq_media_media_use"),
)
