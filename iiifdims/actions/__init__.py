"""Entity actions.

Importing this package registers the bundled actions with
:data:`action_manager`.
"""

from iiifdims.actions import media_attributes  # noqa: F401
from iiifdims.actions.base import ActionBase, ActionDefinition, ServiceContainer
from iiifdims.actions.manager import ActionManager, ActionNotFoundError, action_manager

__all__ = [
    "ActionBase",
    "ActionDefinition",
    "ActionManager",
    "ActionNotFoundError",
    "ServiceContainer",
    "action_manager",
]
