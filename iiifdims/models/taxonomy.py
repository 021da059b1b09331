"""Taxonomy term model."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from iiifdims.models.base import Base, utcnow

MEDIA_USE_VOCABULARY = "islandora_media_use"


class TaxonomyTerm(Base):
    """A term identified by its external URI."""

    __tablename__ = "taxonomy_terms"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    vocabulary: Mapped[str] = mapped_column(
        String(64), default=MEDIA_USE_VOCABULARY, index=True
    )
    name: Mapped[str] = mapped_column(String(255))
    external_uri: Mapped[str] = mapped_column(String(2048), unique=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
