"""
Socket.IO connection manager.

Connection: ws://{host}:{port}/socket.io/ over the websocket transport.
Reconnection is left to ConnectionSupervisor, so the client library's own
reconnect loop is disabled.
"""

import asyncio
import logging
from typing import Any, Callable, Optional

import socketio
from socketio.exceptions import ConnectionError as SocketIOConnectionError

from parley.errors import ConnectivityError

logger = logging.getLogger(__name__)

LIFECYCLE_EVENTS = ("connect", "disconnect", "connect_error")


def server_url(host: str, port: int, secure: bool = False) -> str:
    scheme = "https" if secure else "http"
    return f"{scheme}://{host}:{port}"


class SocketIOManager:
    def __init__(
        self,
        transports: Optional[list[str]] = None,
        client_factory: Callable[..., socketio.AsyncClient] = socketio.AsyncClient,
    ):
        self._transports = transports or ["websocket"]
        self._client_factory = client_factory
        self._sio: Optional[socketio.AsyncClient] = None
        self._connected = False
        self._closing = False
        self._disconnect_callbacks: list[Callable[[], None]] = []

    @property
    def connected(self) -> bool:
        return self._connected and self._sio is not None and self._sio.connected

    async def dial(self, host: str, port: int) -> None:
        """Open a fresh connection. Handlers from a previous connection are dropped."""
        await self.close()
        self._closing = False
        self._disconnect_callbacks = []

        sio = self._client_factory(reconnection=False)

        @sio.event
        async def connect() -> None:
            logger.info("Connected to %s:%d", host, port)

        @sio.event
        async def disconnect(*_args: Any) -> None:
            self._handle_disconnect()

        url = server_url(host, port)
        try:
            await sio.connect(url, transports=self._transports)
        except SocketIOConnectionError as e:
            raise ConnectivityError(str(e) or f"Can't reach {url}", details={"host": host, "port": port})

        self._sio = sio
        self._connected = True

    def on(self, event: str, handler: Callable[[Any], None]) -> None:
        """Register `handler(payload)` for a named server event on the current connection."""
        if self._sio is None:
            raise ConnectivityError("Socket.IO not connected")
        if event in LIFECYCLE_EVENTS:
            raise ValueError(f"{event!r} is a lifecycle event, use on_disconnect()")

        async def forward(*args: Any) -> None:
            handler(args[0] if args else None)

        self._sio.on(event, forward)

    def on_disconnect(self, callback: Callable[[], None]) -> None:
        self._disconnect_callbacks.append(callback)

    def emit(self, event: str, payload: Any) -> None:
        """Fire-and-forget emit, scheduled on the running event loop.

        Errors are logged rather than silently swallowed.
        """
        if not self._sio or not self._sio.connected:
            raise ConnectivityError("Socket.IO not connected")
        sio = self._sio

        async def _do_emit() -> None:
            try:
                await sio.emit(event, payload)
            except Exception as e:
                logger.error("Emit failed for %s: %s", event, e)

        asyncio.get_running_loop().create_task(_do_emit())

    def _handle_disconnect(self) -> None:
        was_connected = self._connected
        self._connected = False
        if self._closing or not was_connected:
            return
        logger.info("Disconnected from server")
        for callback in list(self._disconnect_callbacks):
            callback()

    async def close(self) -> None:
        self._closing = True
        self._connected = False
        if self._sio:
            sio, self._sio = self._sio, None
            await sio.disconnect()
