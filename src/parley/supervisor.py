"""
Connection supervisor: dials the server, watches for disconnects and retries
a failed initial connection with a growing backoff.

Retry schedule: wait 10s before the first attempt, then k-1 minutes before
attempt k (2..10). A successful retry notifies "Connection restored!" and
stops; after the last failed attempt the loop stops silently. A manual
connect that succeeds cancels a pending loop. Only a failed *initial*
connection starts the loop. A disconnect in the middle of a session is
reported once and not retried.
"""

import asyncio
import contextlib
import logging
from enum import Enum
from typing import Awaitable, Callable, Optional, Protocol, Sequence

from parley.config import HostSettings
from parley.errors import ConnectivityError

logger = logging.getLogger(__name__)

INITIAL_RETRY_DELAY_S = 10.0
RETRY_STEP_S = 60.0
MAX_RETRY_ATTEMPTS = 10
SETTLE_DELAY_S = 1.0

DISCONNECTED_MESSAGE = "Disconnected!"
RESTORED_MESSAGE = "Connection restored!"


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class RetryState(str, Enum):
    IDLE = "idle"
    WAITING = "waiting"
    ATTEMPTING = "attempting"
    RESTORED = "restored"
    EXHAUSTED = "exhausted"


class Transport(Protocol):
    @property
    def connected(self) -> bool: ...

    async def dial(self, host: str, port: int) -> None: ...

    def on_disconnect(self, callback: Callable[[], None]) -> None: ...

    async def close(self) -> None: ...


def retry_delays(
    attempts: int = MAX_RETRY_ATTEMPTS,
    initial: float = INITIAL_RETRY_DELAY_S,
    step: float = RETRY_STEP_S,
) -> list[float]:
    """Seconds to sleep before each retry attempt: 10, 60, 120, ... 540."""
    return [initial] + [k * step for k in range(1, attempts)]


class ConnectionSupervisor:
    def __init__(
        self,
        transport: Transport,
        settings: Callable[[], HostSettings],
        notify: Callable[[str], None],
        on_connected: Optional[Callable[[], None]] = None,
        *,
        settle_delay: float = SETTLE_DELAY_S,
        delays: Optional[Sequence[float]] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._transport = transport
        self._settings = settings
        self._notify = notify
        self._on_connected = on_connected
        self._settle_delay = settle_delay
        self._delays = list(delays) if delays is not None else retry_delays()
        self._sleep = sleep
        self._state = ConnectionState.DISCONNECTED
        self._retry_state = RetryState.IDLE
        self._retry_task: Optional[asyncio.Task] = None

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def connected(self) -> bool:
        return self._state is ConnectionState.CONNECTED

    @property
    def retry_state(self) -> RetryState:
        return self._retry_state

    @property
    def retry_task(self) -> Optional[asyncio.Task]:
        return self._retry_task

    async def connect(self, host: str, port: int, is_retry: bool = False) -> bool:
        """Dial host:port. A failed first attempt notifies and starts the retry loop.

        Returns True without dialing when a session is already up.
        """
        if self._is_up():
            return True
        self._state = ConnectionState.CONNECTING
        await self._sleep(self._settle_delay)
        if self._is_up():
            return True
        try:
            await self._transport.dial(host, port)
        except ConnectivityError as e:
            self._state = ConnectionState.DISCONNECTED
            logger.warning("Can't connect to %s:%d: %s", host, port, e)
            if not is_retry:
                next_try = self._delays[0] if self._delays else 0
                self._notify(
                    f"Can't connect to host \"{host}:{port}\"\n"
                    f"Next try after: {next_try:.0f} sec\n"
                    f"Description: {e}\n"
                )
                self.start_retry_loop()
            return False

        self._transport.on_disconnect(self._handle_disconnect)
        self._state = ConnectionState.CONNECTED
        if not is_retry:
            await self._cancel_retry_loop()
        if self._on_connected is not None:
            self._on_connected()
        return True

    def _is_up(self) -> bool:
        return self._state is ConnectionState.CONNECTED and self._transport.connected

    def start_retry_loop(self) -> asyncio.Task:
        if self._retry_task is None or self._retry_task.done():
            self._retry_task = asyncio.get_running_loop().create_task(self._retry_loop())
        return self._retry_task

    async def _retry_loop(self) -> None:
        total = len(self._delays)
        for attempt, delay in enumerate(self._delays, start=1):
            self._retry_state = RetryState.WAITING
            await self._sleep(delay)
            self._retry_state = RetryState.ATTEMPTING
            settings = self._settings()
            logger.info("Reconnect attempt %d/%d to %s", attempt, total, settings.address)
            if await self.connect(settings.host, settings.port, is_retry=True):
                self._retry_state = RetryState.RESTORED
                self._notify(RESTORED_MESSAGE)
                return
            if attempt < total:
                logger.info("Reconnect to %s failed, next try in %.0f sec",
                            settings.address, self._delays[attempt])
        self._retry_state = RetryState.EXHAUSTED
        logger.warning("Giving up after %d reconnect attempts", total)

    def _handle_disconnect(self) -> None:
        self._state = ConnectionState.DISCONNECTED
        self._notify(DISCONNECTED_MESSAGE)

    async def _cancel_retry_loop(self) -> None:
        task, self._retry_task = self._retry_task, None
        if task is None or task.done():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        self._retry_state = RetryState.IDLE

    async def close(self) -> None:
        """Cancel any running retry loop and release the transport."""
        await self._cancel_retry_loop()
        await self._transport.close()
        self._state = ConnectionState.DISCONNECTED
