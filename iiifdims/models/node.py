"""Content node model."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from iiifdims.models.access import AccessResult
from iiifdims.models.base import Base, utcnow
from iiifdims.models.enums import EntityOperation

if TYPE_CHECKING:
    from iiifdims.models.media import Media
    from iiifdims.models.user import User


class Node(Base):
    """A content item that media can be attached to."""

    __tablename__ = "nodes"

    entity_type = "node"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(255), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    changed_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow
    )

    owner_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), index=True)

    owner: Mapped[User] = relationship("User", back_populates="nodes")
    media: Mapped[list[Media]] = relationship(
        "Media", back_populates="media_of", cascade="all, delete-orphan"
    )

    def access(
        self, operation: str, account: User | None = None
    ) -> AccessResult:
        """Check whether ``account`` may perform ``operation`` on this node."""
        if account is None or not account.is_active:
            return AccessResult.neutral("No active account")

        if operation == EntityOperation.VIEW:
            return AccessResult.allowed()

        if operation in (EntityOperation.UPDATE, EntityOperation.DELETE):
            if account.is_admin:
                return AccessResult.allowed("Administrator")
            if account.id == self.owner_id:
                return AccessResult.allowed("Owner")
            return AccessResult.neutral(
                f"Only the owner or an administrator may {operation} this node"
            )

        return AccessResult.neutral(f"Unknown operation {operation!r}")
