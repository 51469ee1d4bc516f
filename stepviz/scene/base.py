"""Base scene interface for rendering backends."""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Any, Tuple

from ..contracts import Step
from ..layout import Position

if TYPE_CHECKING:
    from ..progress import ProgressReport


class BaseScene(metaclass=abc.ABCMeta):
    """Abstract rendering surface.

    Handles returned by ``add_node`` and ``add_connection`` are opaque to
    callers and only ever passed back to the same scene.
    """

    @abc.abstractmethod
    def add_node(self, step: Step, position: Position) -> Any:
        """Create a node visual and return its handle."""
        raise NotImplementedError

    @abc.abstractmethod
    def remove_node(self, handle: Any) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def update_node_status(self, handle: Any, status: str) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def move_node(self, handle: Any, position: Position) -> None:
        raise NotImplementedError

    def reveal_node(self, handle: Any) -> None:
        """Start the entrance transition of a node (no-op by default)."""
        pass

    @abc.abstractmethod
    def add_connection(self, path_data: str, state: str) -> Any:
        """Create a connection visual from SVG path data and return its handle."""
        raise NotImplementedError

    @abc.abstractmethod
    def remove_connection(self, handle: Any) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def update_connection_state(self, handle: Any, state: str) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def viewport_size(self) -> Tuple[float, float]:
        """Current ``(width, height)`` of the drawing area."""
        raise NotImplementedError

    def set_connection_status(self, status: str) -> None:
        """Show the stream connection status (no-op by default)."""
        pass

    def set_progress(self, report: "ProgressReport") -> None:
        """Show workflow progress (no-op by default)."""
        pass

    def show_workflow_info(self) -> None:
        """Reveal the workflow summary panel (no-op by default)."""
        pass
