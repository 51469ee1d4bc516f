"""Base transport interface for the workflow event stream."""

from __future__ import annotations

import abc
from typing import AsyncIterator, Union


class BaseTransport(metaclass=abc.ABCMeta):
    """Abstract streaming connection carrying one JSON event per message."""

    @abc.abstractmethod
    async def connect(self) -> None:
        """Open the connection.

        Raises:
            TransportError: If the connection cannot be established.
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def disconnect(self) -> None:
        """Close the connection. Safe to call when already closed."""
        raise NotImplementedError

    @abc.abstractmethod
    def messages(self) -> AsyncIterator[Union[str, bytes]]:
        """Yield inbound messages until the connection closes.

        Text frames arrive as ``str``; binary frames as undecoded ``bytes``.

        Ends normally on a clean close and raises ``TransportError`` when
        the connection fails.
        """
        raise NotImplementedError
