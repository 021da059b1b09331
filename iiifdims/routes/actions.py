"""Action execution routes."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from iiifdims.actions import ActionNotFoundError, ServiceContainer, action_manager
from iiifdims.database import get_db
from iiifdims.models import AccessResult, Node, User
from iiifdims.routes.auth import require_auth
from iiifdims.services.iiif import IiifError, IiifInfo, open_iiif_info
from iiifdims.services.media import EntityNotFoundError, MediaSourceError, load_node

router = APIRouter(prefix="/actions", tags=["actions"])

logger = logging.getLogger("iiifdims.actions")


async def get_iiif_info() -> AsyncIterator[IiifInfo]:
    """Per-request IIIF client."""
    async with open_iiif_info() as iiif_info:
        yield iiif_info


@router.get("/")
async def list_actions(
    current_user: User = Depends(require_auth),
) -> list[dict[str, str]]:
    """List the actions that can be run."""
    return [definition.as_dict() for definition in action_manager.definitions()]


@router.post("/{plugin_id}/nodes/{node_id}")
async def run_node_action(
    plugin_id: str,
    node_id: int,
    current_user: User = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
    iiif_info: IiifInfo = Depends(get_iiif_info),
) -> dict[str, Any]:
    """Run an action against one node on behalf of the current user."""
    try:
        definition = action_manager.get(plugin_id)
    except ActionNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    if definition.entity_type != Node.entity_type:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Action {plugin_id} does not apply to nodes",
        )

    try:
        node = await load_node(db, node_id)
    except EntityNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc

    container = ServiceContainer(db=db, iiif_info=iiif_info)
    action = action_manager.create_instance(plugin_id, container)

    access = action.access(node, current_user, return_as_object=True)
    if isinstance(access, AccessResult):
        allowed, reason = access.is_allowed(), access.reason
    else:
        allowed, reason = bool(access), ""
    if not allowed:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=reason or "Access denied",
        )

    try:
        updated = await action.execute(node)
    except IiifError as exc:
        logger.warning("Action %s failed on node %s: %s", plugin_id, node_id, exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
        ) from exc
    except MediaSourceError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail=str(exc)
        ) from exc

    return {"action": plugin_id, "node_id": node.id, "updated_media": updated}
