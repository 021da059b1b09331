"""Action discovery and instantiation."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from iiifdims.actions.base import ActionBase, ActionDefinition, ServiceContainer
from iiifdims.actions.derivers import EntityChangedActionDeriver

logger = logging.getLogger("iiifdims.actions")

ActionT = TypeVar("ActionT", bound=type[ActionBase])


class ActionNotFoundError(KeyError):
    """Raised for an action id nobody registered."""

    def __init__(self, plugin_id: str) -> None:
        super().__init__(plugin_id)
        self.plugin_id = plugin_id

    def __str__(self) -> str:
        return f"Unknown action {self.plugin_id!r}"


class ActionManager:
    """Registry of available actions keyed by derivative id."""

    def __init__(self) -> None:
        self._definitions: dict[str, ActionDefinition] = {}

    def register(
        self, deriver: EntityChangedActionDeriver | None = None
    ) -> Callable[[ActionT], ActionT]:
        """Class decorator adding an action (and its derivatives)."""

        def decorator(plugin_class: ActionT) -> ActionT:
            if deriver is None:
                definitions = [
                    ActionDefinition(
                        id=plugin_class.plugin_id,
                        label=plugin_class.label,
                        entity_type="",
                        plugin_class=plugin_class,
                    )
                ]
            else:
                definitions = deriver.derivatives(plugin_class)

            for definition in definitions:
                if definition.id in self._definitions:
                    raise ValueError(f"Action {definition.id!r} already registered")
                self._definitions[definition.id] = definition
                logger.debug("Registered action %s", definition.id)
            return plugin_class

        return decorator

    def definitions(self, entity_type: str | None = None) -> list[ActionDefinition]:
        return [
            definition
            for definition in sorted(self._definitions.values(), key=lambda d: d.id)
            if entity_type is None or definition.entity_type == entity_type
        ]

    def get(self, plugin_id: str) -> ActionDefinition:
        try:
            return self._definitions[plugin_id]
        except KeyError:
            raise ActionNotFoundError(plugin_id) from None

    def create_instance(
        self,
        plugin_id: str,
        container: ServiceContainer,
        configuration: dict[str, Any] | None = None,
    ) -> ActionBase:
        definition = self.get(plugin_id)
        return definition.plugin_class.create(
            container, configuration or {}, plugin_id, definition
        )


action_manager = ActionManager()
