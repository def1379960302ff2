"""Shared test fixtures and fake WebSocket transport."""

import asyncio

import pytest
from starlette.websockets import WebSocketState

from showcase_api.services.connection_registry import (
    Connection,
    ConnectionRegistry,
)


class FakeWebSocket:
    """In-memory stand-in for a Starlette WebSocket.

    ``send_error`` makes ``send_text`` raise; ``stall`` makes it hang until
    cancelled, simulating a peer that never drains its buffer; ``stall_close``
    does the same for ``close``. ``incoming`` holds frames (or exceptions)
    handed out by ``receive``.
    """

    def __init__(
        self,
        *,
        send_error: Exception | None = None,
        stall: bool = False,
        stall_close: bool = False,
        incoming: list | None = None,
    ) -> None:
        self.client_state = WebSocketState.CONNECTED
        self.application_state = WebSocketState.CONNECTED
        self.sent: list[str] = []
        self.close_code: int | None = None
        self.close_reason: str | None = None
        self._send_error = send_error
        self._stall = stall
        self._stall_close = stall_close
        self._incoming = list(incoming or [])

    async def accept(self) -> None:
        pass

    async def receive(self) -> dict:
        """Replay queued frames; exceptions in the queue are raised."""
        if not self._incoming:
            await asyncio.Event().wait()
        item = self._incoming.pop(0)
        if isinstance(item, Exception):
            raise item
        if isinstance(item, bytes):
            return {"type": "websocket.receive", "bytes": item}
        return {"type": "websocket.receive", "text": item}

    async def send_text(self, data: str) -> None:
        if self._send_error is not None:
            raise self._send_error
        if self._stall:
            await asyncio.Event().wait()
        self.sent.append(data)

    async def close(self, code: int = 1000, reason: str | None = None) -> None:
        if self._stall_close:
            await asyncio.Event().wait()
        if self.application_state == WebSocketState.DISCONNECTED:
            raise RuntimeError("Cannot call close twice")
        self.application_state = WebSocketState.DISCONNECTED
        self.close_code = code
        self.close_reason = reason

    def drop(self) -> None:
        """Simulate the peer going away without a close handshake."""
        self.client_state = WebSocketState.DISCONNECTED


def make_registered(user_id: str, registry: ConnectionRegistry, **kwargs) -> Connection:
    """Build a connection registered under ``user_id``."""
    connection = Connection(FakeWebSocket(**kwargs))
    connection.mark_registered(user_id)
    registry.register(connection)
    return connection


@pytest.fixture
def registry() -> ConnectionRegistry:
    return ConnectionRegistry(send_timeout=0.2)
