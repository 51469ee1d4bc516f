"""WebSocket transport for the live event stream."""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Optional, Union

from websockets.asyncio.client import connect as websocket_connect
from websockets.exceptions import ConnectionClosedError, ConnectionClosedOK, WebSocketException

from ..errors import TransportError
from .base import BaseTransport

logger = logging.getLogger(__name__)


class WebSocketTransport(BaseTransport):
    """Client side of the workflow server's WebSocket endpoint."""

    def __init__(self, host: str = "localhost", port: int = 8081, path: str = "/") -> None:
        self.host = host
        self.port = port
        self.path = path if path.startswith("/") else f"/{path}"
        self._ws: Optional[Any] = None

    @property
    def url(self) -> str:
        return f"ws://{self.host}:{self.port}{self.path}"

    async def connect(self) -> None:
        """Open the WebSocket connection."""
        try:
            self._ws = await websocket_connect(self.url)
        except (OSError, WebSocketException) as e:
            raise TransportError(f"Failed to connect to {self.url}: {e}") from e
        logger.info(f"Connected to workflow server at {self.url}")

    async def disconnect(self) -> None:
        """Close the WebSocket connection."""
        if self._ws is not None:
            ws, self._ws = self._ws, None
            await ws.close()

    async def messages(self) -> AsyncIterator[Union[str, bytes]]:
        # binary frames are passed through undecoded; parse_event rejects invalid UTF-8
        if self._ws is None:
            raise TransportError("WebSocket transport is not connected")
        ws = self._ws
        try:
            while True:
                yield await ws.recv()
        except ConnectionClosedOK:
            return
        except ConnectionClosedError as e:
            raise TransportError(f"Connection to {self.url} lost: {e}") from e
        except OSError as e:
            raise TransportError(f"Connection to {self.url} failed: {e}") from e
