"""Transport factory and initialization."""

from __future__ import annotations

import os
from typing import Optional

from ..config import StepvizConfig, load_config
from .base import BaseTransport
from .inmemory import InMemoryTransport


def get_transport(
    backend: Optional[str] = None, config: Optional[StepvizConfig] = None
) -> BaseTransport:
    """Factory function to get the configured transport."""

    config = config or load_config()
    backend = (
        backend
        or os.getenv("STEPVIZ_TRANSPORT")
        or config.transport.backend
    ).lower()

    if backend == "inmemory":
        return InMemoryTransport()
    elif backend == "websocket":
        from .websocket import WebSocketTransport

        conn = config.transport.connection
        return WebSocketTransport(host=conn.host, port=conn.port, path=conn.path)
    else:
        raise ValueError(f"Unsupported transport backend: {backend}")


__all__ = ["BaseTransport", "InMemoryTransport", "get_transport"]
