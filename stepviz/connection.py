"""Lifecycle of the streaming connection to the workflow server."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Callable, Optional, Union

from .config import ConnectionConfig
from .errors import TransportError
from .scheduling import AsyncioScheduler, BaseScheduler, TimerHandle
from .transports import BaseTransport

logger = logging.getLogger(__name__)


class ConnectionStatus:
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    ERROR = "error"


class ConnectionManager:
    """Keeps one connection open, reconnecting forever at a fixed delay.

    Every connection attempt runs as its own task tagged with a generation
    number. Superseding an attempt (manual reconnect or stop) bumps the
    generation, so a stale attempt that closes later neither reports status
    nor schedules another reconnect.
    """

    def __init__(
        self,
        transport: BaseTransport,
        on_message: Callable[[Union[str, bytes]], object],
        scheduler: Optional[BaseScheduler] = None,
        config: Optional[ConnectionConfig] = None,
        on_status: Optional[Callable[[str], None]] = None,
    ) -> None:
        config = config or ConnectionConfig()
        self._transport = transport
        self._on_message = on_message
        self._on_status = on_status
        self._scheduler = scheduler or AsyncioScheduler()
        self.reconnect_delay = config.reconnect_delay
        self.manual_reconnect_delay = config.manual_reconnect_delay

        self.status = ConnectionStatus.DISCONNECTED
        self.attempts = 0
        self._generation = 0
        self._task: Optional[asyncio.Task] = None
        self._timer: Optional[TimerHandle] = None
        self._stopped = True

    @property
    def running(self) -> bool:
        return not self._stopped

    def start(self) -> None:
        """Open the first connection immediately."""
        if not self._stopped:
            return
        self._stopped = False
        self._set_status(ConnectionStatus.CONNECTING)
        self._open()

    def reconnect(self) -> None:
        """Force-close the current connection and open a new one shortly after."""
        logger.info("Manual reconnect requested")
        self._stopped = False
        self._cancel_timer()
        self._supersede_current()
        self._set_status(ConnectionStatus.CONNECTING)
        self._timer = self._scheduler.call_later(self.manual_reconnect_delay, self._open)

    async def stop(self) -> None:
        """Close the connection and cancel any pending reconnect."""
        self._stopped = True
        self._cancel_timer()
        task = self._supersede_current(close_transport=False)
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        await self._transport.disconnect()
        self._set_status(ConnectionStatus.DISCONNECTED)

    # ------------------------------------------------------------------
    def _open(self) -> None:
        self._timer = None
        if self._stopped:
            return
        if self._task is not None and not self._task.done():
            logger.debug("Connection attempt already in flight; skipping")
            return
        self._generation += 1
        self.attempts += 1
        self._set_status(ConnectionStatus.CONNECTING)
        self._task = asyncio.ensure_future(self._run(self._generation))

    async def _run(self, generation: int) -> None:
        try:
            await self._transport.connect()
            if generation != self._generation:
                await self._transport.disconnect()
                return
            self._set_status(ConnectionStatus.CONNECTED)
            async for raw in self._transport.messages():
                if generation != self._generation:
                    break
                self._deliver(raw)
        except TransportError as e:
            if generation == self._generation:
                logger.error(f"Connection error: {e}")
                self._set_status(ConnectionStatus.ERROR)
        except Exception as e:
            if generation == self._generation:
                logger.exception(f"Unexpected connection failure: {e}")
                self._set_status(ConnectionStatus.ERROR)
        finally:
            if generation == self._generation:
                self._handle_close()

    def _deliver(self, raw: Union[str, bytes]) -> None:
        try:
            self._on_message(raw)
        except Exception as e:
            logger.exception(f"Failed to handle inbound message: {e}")

    def _handle_close(self) -> None:
        logger.info("Disconnected from workflow server")
        self._set_status(ConnectionStatus.DISCONNECTED)
        if self._stopped:
            return
        self._cancel_timer()
        self._timer = self._scheduler.call_later(self.reconnect_delay, self._open)
        logger.debug(f"Reconnect scheduled in {self.reconnect_delay}s")

    def _supersede_current(self, close_transport: bool = True) -> Optional[asyncio.Task]:
        self._generation += 1
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
        if close_transport:
            asyncio.ensure_future(self._transport.disconnect())
        return task

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _set_status(self, status: str) -> None:
        if status == self.status:
            return
        self.status = status
        logger.debug(f"Connection status -> {status}")
        if self._on_status is not None:
            self._on_status(status)
