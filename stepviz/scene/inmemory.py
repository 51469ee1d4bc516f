"""In-memory scene for tests and headless runs."""

from __future__ import annotations

import itertools
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel

from ..contracts import Step
from ..layout import Position
from ..progress import ProgressReport
from .base import BaseScene


class NodeElement(BaseModel):
    step_id: str
    title: str
    description: str
    status: str
    position: Position
    visible: bool = False


class ConnectionElement(BaseModel):
    path: str
    state: str


class InMemoryScene(BaseScene):
    """Keeps every visual element as a plain record."""

    def __init__(self, width: float = 1200, height: float = 800) -> None:
        self.width = width
        self.height = height
        self.nodes: Dict[int, NodeElement] = {}
        self.connections: Dict[int, ConnectionElement] = {}
        self.connection_status: Optional[str] = None
        self.status_history: List[str] = []
        self.progress: ProgressReport = ProgressReport()
        self.workflow_info_visible = False
        self._handles = itertools.count(1)

    def resize(self, width: float, height: float) -> None:
        self.width = width
        self.height = height

    def viewport_size(self) -> Tuple[float, float]:
        return self.width, self.height

    # ------------------------------------------------------------------
    def add_node(self, step: Step, position: Position) -> int:
        handle = next(self._handles)
        self.nodes[handle] = NodeElement(
            step_id=step.id,
            title=step.name,
            description=step.description,
            status=step.status,
            position=position,
        )
        self._changed()
        return handle

    def remove_node(self, handle: int) -> None:
        del self.nodes[handle]
        self._changed()

    def update_node_status(self, handle: int, status: str) -> None:
        self.nodes[handle].status = status
        self._changed()

    def move_node(self, handle: int, position: Position) -> None:
        self.nodes[handle].position = position
        self._changed()

    def reveal_node(self, handle: int) -> None:
        self.nodes[handle].visible = True
        self._changed()

    def add_connection(self, path_data: str, state: str) -> int:
        handle = next(self._handles)
        self.connections[handle] = ConnectionElement(path=path_data, state=state)
        self._changed()
        return handle

    def remove_connection(self, handle: int) -> None:
        del self.connections[handle]
        self._changed()

    def update_connection_state(self, handle: int, state: str) -> None:
        self.connections[handle].state = state
        self._changed()

    # ------------------------------------------------------------------
    def set_connection_status(self, status: str) -> None:
        self.connection_status = status
        self.status_history.append(status)
        self._changed()

    def set_progress(self, report: ProgressReport) -> None:
        self.progress = report
        self._changed()

    def show_workflow_info(self) -> None:
        self.workflow_info_visible = True
        self._changed()

    def _changed(self) -> None:
        """Hook called after every mutation."""
        pass
