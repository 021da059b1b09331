"""Managed file model."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from iiifdims.models.base import Base, utcnow


class File(Base):
    """A stored binary, addressed by a storage URI (``public://...``)."""

    __tablename__ = "files"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    filename: Mapped[str] = mapped_column(String(255))
    uri: Mapped[str] = mapped_column(String(2048))
    mime_type: Mapped[str] = mapped_column(
        String(255), default="application/octet-stream"
    )
    size: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
