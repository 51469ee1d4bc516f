"""In-memory transport for testing and scripted playback."""

from __future__ import annotations

import asyncio
from typing import AsyncIterator, List, Optional, Union

from ..errors import TransportError
from .base import BaseTransport

_CLOSED = object()


class InMemoryTransport(BaseTransport):
    """Simple in-process message stream for unit tests.

    Messages fed while disconnected are buffered and delivered on the next
    connection.
    """

    def __init__(self) -> None:
        self._queue: Optional[asyncio.Queue] = None
        self._backlog: List[str] = []
        self._connect_failures = 0
        self.connected = False
        self.connect_attempts = 0
        self.disconnects = 0

    async def connect(self) -> None:
        self.connect_attempts += 1
        if self._connect_failures:
            self._connect_failures -= 1
            raise TransportError("Simulated connection failure")
        self._queue = asyncio.Queue()
        for message in self._backlog:
            self._queue.put_nowait(message)
        self._backlog = []
        self.connected = True

    async def disconnect(self) -> None:
        if self.connected:
            self.disconnects += 1
            self._close(_CLOSED)

    async def messages(self) -> AsyncIterator[str]:
        if self._queue is None:
            raise TransportError("In-memory transport is not connected")
        queue = self._queue
        while True:
            item = await queue.get()
            if item is _CLOSED:
                return
            if isinstance(item, BaseException):
                raise item
            yield item

    # ------------------------------------------------------------------
    def feed(self, message: Union[str, bytes]) -> None:
        """Deliver a message as if the server had sent it."""
        if isinstance(message, bytes):
            message = message.decode("utf-8")
        if self.connected and self._queue is not None:
            self._queue.put_nowait(message)
        else:
            self._backlog.append(message)

    def close_remote(self) -> None:
        """Close the connection from the server side."""
        if self.connected:
            self._close(_CLOSED)

    def fail(self, error: Optional[Exception] = None) -> None:
        """Break the current connection with a transport error."""
        if self.connected:
            self._close(error or TransportError("Simulated transport failure"))

    def fail_next_connect(self, times: int = 1) -> None:
        """Make the next ``times`` connection attempts fail."""
        self._connect_failures += times

    def _close(self, item: object) -> None:
        self.connected = False
        if self._queue is not None:
            self._queue.put_nowait(item)
