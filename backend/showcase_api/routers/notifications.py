"""Notification endpoints: push a message to a connected user."""

import json
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from showcase_api.dependencies import get_connection_registry
from showcase_api.schemas.notification import (
    NotificationIn,
    NotificationSentOut,
    PresenceOut,
)
from showcase_api.services.connection_registry import ConnectionRegistry

router = APIRouter(prefix="/notify", tags=["notifications"])


@router.post("/{user_id}", response_model=NotificationSentOut)
async def notify_user(
    user_id: str,
    notification: NotificationIn,
    registry: Annotated[ConnectionRegistry, Depends(get_connection_registry)],
):
    """Send a title/body notification to the user's live socket."""
    if not notification.title or not notification.body:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Both title and body are required.",
        )

    payload = json.dumps(
        {"title": notification.title, "body": notification.body},
        ensure_ascii=False,
    )
    if not await registry.send_to_user(user_id, payload):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User '{user_id}' is not connected.",
        )
    return NotificationSentOut(message=f"Notification sent to '{user_id}'.")


@router.get("/{user_id}/status", response_model=PresenceOut)
async def user_status(
    user_id: str,
    registry: Annotated[ConnectionRegistry, Depends(get_connection_registry)],
):
    """Report whether the user currently has a live notification socket."""
    return PresenceOut(user_id=user_id, connected=registry.is_connected(user_id))
