"""Expand one action class into per-entity-type derivatives."""

from __future__ import annotations

from collections.abc import Iterable

from iiifdims.actions.base import ActionBase, ActionDefinition
from iiifdims.models import Media, Node

# Entity types that keep a changed timestamp.
CHANGED_ENTITY_TYPES: tuple[str, ...] = (Node.entity_type, Media.entity_type)


class EntityChangedActionDeriver:
    """One derivative per entity type that tracks when it was changed."""

    def __init__(self, entity_types: Iterable[str] | None = None) -> None:
        if entity_types is None:
            self.entity_types = CHANGED_ENTITY_TYPES
        else:
            unknown = set(entity_types) - set(CHANGED_ENTITY_TYPES)
            if unknown:
                raise ValueError(f"Entity types without a changed time: {unknown}")
            self.entity_types = tuple(entity_types)

    def derivatives(self, plugin_class: type[ActionBase]) -> list[ActionDefinition]:
        return [
            ActionDefinition(
                id=f"{plugin_class.plugin_id}:{entity_type}",
                label=plugin_class.label,
                entity_type=entity_type,
                plugin_class=plugin_class,
            )
            for entity_type in self.entity_types
        ]
