"""Track the live notification connection for each user and deliver to it."""

import asyncio
import enum
import itertools
import logging
import threading

from starlette.websockets import WebSocket, WebSocketDisconnect, WebSocketState

logger = logging.getLogger(__name__)

_connection_ids = itertools.count(1)


class ConnectionState(enum.Enum):
    UNREGISTERED = "unregistered"
    REGISTERED = "registered"
    CLOSED = "closed"


class Connection:
    """One accepted notification socket and its registration state.

    The transport layer owns the socket and its teardown; the registry only
    keeps a reference while the connection is registered.
    """

    def __init__(self, websocket: WebSocket) -> None:
        self.websocket = websocket
        self.connection_id = next(_connection_ids)
        self.state = ConnectionState.UNREGISTERED
        self.user_id: str | None = None
        self.send_lock = asyncio.Lock()

    def __repr__(self) -> str:
        return (
            f"Connection(id={self.connection_id}, state={self.state.value}, "
            f"user_id={self.user_id!r})"
        )

    @property
    def is_open(self) -> bool:
        """Return True when the socket can currently accept writes."""
        if self.state is ConnectionState.CLOSED:
            return False
        return (
            self.websocket.client_state == WebSocketState.CONNECTED
            and self.websocket.application_state == WebSocketState.CONNECTED
        )

    def mark_registered(self, user_id: str) -> bool:
        """Move an unregistered connection to REGISTERED under ``user_id``."""
        if self.state is not ConnectionState.UNREGISTERED:
            return False
        self.user_id = user_id
        self.state = ConnectionState.REGISTERED
        return True

    def mark_closed(self) -> bool:
        """Move to CLOSED. Only the first call reports a transition."""
        if self.state is ConnectionState.CLOSED:
            return False
        self.state = ConnectionState.CLOSED
        return True


class ConnectionRegistry:
    """Map each user id to at most one live connection.

    Every read and write of the mapping happens under ``_lock``; the lock is
    never held across an ``await``.
    """

    def __init__(self, send_timeout: float) -> None:
        self._connections: dict[str, Connection] = {}
        self._lock = threading.Lock()
        self.send_timeout = send_timeout

    def __len__(self) -> int:
        with self._lock:
            return len(self._connections)

    def register(self, connection: Connection) -> Connection | None:
        """Insert a registered connection, replacing any previous entry.

        The replaced connection is returned but left open; it removes nothing
        when it later closes because its entry no longer points at it.
        """
        user_id = connection.user_id
        if connection.state is not ConnectionState.REGISTERED or not user_id:
            raise ValueError(f"{connection!r} is not registered")
        with self._lock:
            previous = self._connections.get(user_id)
            self._connections[user_id] = connection
        if previous is not None and previous is not connection:
            logger.info(
                "User %s re-registered; connection %s replaces %s",
                user_id,
                connection.connection_id,
                previous.connection_id,
            )
            return previous
        return None

    def unregister(self, connection: Connection) -> bool:
        """Remove the entry for ``connection`` if it is still the current one."""
        user_id = connection.user_id
        if user_id is None:
            return False
        with self._lock:
            if self._connections.get(user_id) is not connection:
                return False
            del self._connections[user_id]
        return True

    def get(self, user_id: str) -> Connection | None:
        with self._lock:
            return self._connections.get(user_id)

    def is_connected(self, user_id: str) -> bool:
        connection = self.get(user_id)
        return connection is not None and connection.is_open

    def user_ids(self) -> list[str]:
        with self._lock:
            return list(self._connections)

    async def send_to_user(self, user_id: str, message: str) -> bool:
        """Write ``message`` to the connection registered for ``user_id``.

        Returns False when the user has no live connection or the write fails.
        Never raises and never changes the registry; stale entries are removed
        by their own connection's close handling.
        """
        connection = self.get(str(user_id))
        if connection is None or not connection.is_open:
            logger.info("User %s is not connected; notification dropped", user_id)
            return False

        try:
            await asyncio.wait_for(
                self._write(connection, message), timeout=self.send_timeout
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Send to user %s timed out after %.1fs", user_id, self.send_timeout
            )
            return False
        except (WebSocketDisconnect, RuntimeError, ConnectionError, OSError) as exc:
            logger.warning("Send to user %s failed: %s", user_id, exc)
            return False

        logger.info("Delivered notification to user %s", user_id)
        return True

    async def _write(self, connection: Connection, message: str) -> None:
        async with connection.send_lock:
            await connection.websocket.send_text(message)

    async def close_all(self, code: int) -> None:
        """Close every registered connection and empty the registry."""
        with self._lock:
            connections = list(self._connections.values())
            self._connections.clear()

        for connection in connections:
            connection.mark_closed()
            try:
                await asyncio.wait_for(
                    connection.websocket.close(code=code), timeout=self.send_timeout
                )
            except asyncio.TimeoutError:
                logger.warning(
                    "Closing connection %s timed out after %.1fs",
                    connection.connection_id,
                    self.send_timeout,
                )
            except (RuntimeError, ConnectionError, OSError) as exc:
                logger.debug(
                    "Closing connection %s failed: %s", connection.connection_id, exc
                )
        if connections:
            logger.info("Closed %d notification connections", len(connections))
