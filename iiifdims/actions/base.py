"""Base classes for entity actions."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar

from sqlalchemy.ext.asyncio import AsyncSession

from iiifdims.config import Config, config
from iiifdims.models import AccessResult, User
from iiifdims.services.iiif import IiifInfo


@dataclass
class ServiceContainer:
    """Services an action may pull in when it is instantiated."""

    db: AsyncSession
    iiif_info: IiifInfo
    settings: Config = config
    logger: logging.Logger = field(
        default_factory=lambda: logging.getLogger("iiifdims.actions")
    )


@dataclass(frozen=True)
class ActionDefinition:
    """Discovered action: one per (plugin class, entity type)."""

    id: str
    label: str
    entity_type: str
    plugin_class: type[ActionBase]

    def as_dict(self) -> dict[str, str]:
        return {"id": self.id, "label": self.label, "entity_type": self.entity_type}


class ActionBase(ABC):
    """An operation run against a single entity."""

    plugin_id: ClassVar[str]
    label: ClassVar[str]

    def __init__(
        self,
        configuration: dict[str, Any],
        plugin_id: str,
        definition: ActionDefinition,
    ) -> None:
        self.configuration = configuration
        self.derivative_id = plugin_id
        self.definition = definition

    @classmethod
    def create(
        cls,
        container: ServiceContainer,
        configuration: dict[str, Any],
        plugin_id: str,
        definition: ActionDefinition,
    ) -> ActionBase:
        return cls(configuration, plugin_id, definition)

    @abstractmethod
    async def execute(self, entity: Any) -> Any:
        """Run the action on ``entity``."""

    @abstractmethod
    def access(
        self,
        entity: Any,
        account: User | None = None,
        return_as_object: bool = False,
    ) -> bool | AccessResult:
        """Whether ``account`` may run this action on ``entity``."""
