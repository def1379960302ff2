"""Notification WebSocket: registration handshake, message loop, and cleanup."""

import asyncio
import logging
from typing import Annotated

from fastapi import Depends, FastAPI, WebSocket, WebSocketDisconnect

from showcase_api.config import settings
from showcase_api.constants import (
    WS_CLOSE_HANDSHAKE_TIMEOUT,
    WS_CLOSE_INTERNAL_ERROR,
)
from showcase_api.dependencies import get_connection_registry
from showcase_api.services.connection_registry import (
    Connection,
    ConnectionRegistry,
    ConnectionState,
)
from showcase_api.services.handshake import register_connection

logger = logging.getLogger(__name__)


async def _receive_frame(websocket: WebSocket) -> str | bytes:
    """Return the next text or binary frame, raising on disconnect."""
    message = await websocket.receive()
    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(message.get("code", 1000), message.get("reason"))
    text = message.get("text")
    if text is not None:
        return text
    return message.get("bytes") or b""


async def _close_quietly(websocket: WebSocket, code: int) -> None:
    try:
        await websocket.close(code=code)
    except (RuntimeError, ConnectionError, OSError):
        pass


def _release(connection: Connection, registry: ConnectionRegistry) -> None:
    """Close out ``connection`` and drop its registry entry if still current."""
    was_registered = connection.state is ConnectionState.REGISTERED
    if not connection.mark_closed():
        return
    if registry.unregister(connection):
        logger.info("User %s disconnected", connection.user_id)
    elif was_registered:
        logger.info(
            "Connection %s for user %s closed after being replaced",
            connection.connection_id,
            connection.user_id,
        )
    else:
        logger.info(
            "Unregistered connection %s disconnected", connection.connection_id
        )


async def notification_socket(
    websocket: WebSocket,
    registry: Annotated[ConnectionRegistry, Depends(get_connection_registry)],
):
    """Accept a client, register it on its first frame, then keep it open."""
    await websocket.accept()
    connection = Connection(websocket)
    logger.info(
        "Connection %s accepted; waiting for registration", connection.connection_id
    )

    try:
        try:
            first = await asyncio.wait_for(
                _receive_frame(websocket),
                timeout=settings.ws_handshake_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Connection %s sent no registration within %.1fs; closing",
                connection.connection_id,
                settings.ws_handshake_timeout_seconds,
            )
            connection.mark_closed()
            await _close_quietly(websocket, WS_CLOSE_HANDSHAKE_TIMEOUT)
            return

        if not await register_connection(connection, registry, first):
            return

        while True:
            frame = await _receive_frame(websocket)
            logger.debug("Message from user %s: %r", connection.user_id, frame)

    except WebSocketDisconnect:
        pass
    except Exception as exc:
        logger.error(
            "Notification socket error on connection %s: %s",
            connection.connection_id,
            exc,
        )
        _release(connection, registry)
        await _close_quietly(websocket, WS_CLOSE_INTERNAL_ERROR)
    finally:
        _release(connection, registry)


def init_notification_socket(app: FastAPI) -> ConnectionRegistry:
    """Create the app's connection registry and mount the notification socket."""
    registry = ConnectionRegistry(send_timeout=settings.ws_send_timeout_seconds)
    app.state.connection_registry = registry
    app.add_api_websocket_route(settings.ws_path, notification_socket)
    return registry
