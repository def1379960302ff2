"""Single-shot registration handshake for notification sockets."""

import logging

from pydantic import ValidationError

from showcase_api.constants import WS_CLOSE_INVALID_REGISTRATION
from showcase_api.schemas.notification import RegistrationMessage
from showcase_api.services.connection_registry import (
    Connection,
    ConnectionRegistry,
    ConnectionState,
)

logger = logging.getLogger(__name__)


def parse_registration(raw: str | bytes) -> RegistrationMessage | None:
    """Decode a registration frame, or return None for anything else."""
    try:
        return RegistrationMessage.model_validate_json(raw)
    except ValidationError:
        return None


async def register_connection(
    connection: Connection,
    registry: ConnectionRegistry,
    raw: str | bytes,
) -> bool:
    """Apply the first frame of ``connection`` as its registration.

    A connection gets exactly one attempt: an invalid frame closes it, and a
    connection that already left UNREGISTERED is never handled again.
    """
    if connection.state is not ConnectionState.UNREGISTERED:
        return False

    message = parse_registration(raw)
    if message is None:
        logger.warning(
            "Invalid registration on connection %s; closing",
            connection.connection_id,
        )
        connection.mark_closed()
        await connection.websocket.close(
            code=WS_CLOSE_INVALID_REGISTRATION, reason="Invalid registration"
        )
        return False

    connection.mark_registered(message.user_id)
    registry.register(connection)
    logger.info(
        "Registered connection %s for user %s",
        connection.connection_id,
        message.user_id,
    )
    return True
