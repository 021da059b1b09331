"""Media model."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from iiifdims.models.associations import media_media_use
from iiifdims.models.base import Base, utcnow
from iiifdims.models.enums import BUNDLE_FIELDS, MediaBundle

if TYPE_CHECKING:
    from iiifdims.models.node import Node
    from iiifdims.models.taxonomy import TaxonomyTerm


class UnknownFieldError(AttributeError):
    """Raised when writing a field the media bundle does not expose."""

    def __init__(self, bundle: str, field: str) -> None:
        super().__init__(f"Media bundle {bundle!r} has no field {field!r}")
        self.bundle = bundle
        self.field = field


class Media(Base):
    """Media entity wrapping one source file."""

    __tablename__ = "media"

    entity_type = "media"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255))
    bundle: Mapped[str] = mapped_column(String(32), default=MediaBundle.FILE.value)
    width: Mapped[int | None] = mapped_column(Integer, nullable=True)
    height: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    changed_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow
    )

    media_of_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("nodes.id", ondelete="CASCADE"), nullable=True, index=True
    )
    file_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("files.id"), nullable=True
    )

    media_of: Mapped[Node | None] = relationship("Node", back_populates="media")
    media_use: Mapped[list[TaxonomyTerm]] = relationship(
        "TaxonomyTerm", secondary=lambda: media_media_use
    )

    def field_names(self) -> frozenset[str]:
        try:
            return BUNDLE_FIELDS[MediaBundle(self.bundle)]
        except ValueError:
            return frozenset()

    def has_field(self, name: str) -> bool:
        """Return True when this media's bundle exposes ``name``."""
        return name in self.field_names()

    def set(self, name: str, value: object) -> None:
        """Write a bundle field; unknown fields raise UnknownFieldError."""
        if not self.has_field(name):
            raise UnknownFieldError(self.bundle, name)
        setattr(self, name, value)
