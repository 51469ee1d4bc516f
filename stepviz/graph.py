"""Graph state for the workflow currently being visualized."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel

from .contracts import Step, StepStatus
from .layout import Position

logger = logging.getLogger(__name__)


class ConnectionState:
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"


class Node(BaseModel):
    """Visual record for one step."""

    step: Step
    index: int
    position: Position
    handle: Any = None


class Connection(BaseModel):
    """Directed edge between two consecutive steps."""

    source_id: str
    target_id: str
    state: str = ConnectionState.PENDING
    handle: Any = None


def derive_connection_state(source: Step, target: Step) -> str:
    """Connection state given the statuses of its endpoints."""
    if source.status == StepStatus.COMPLETED:
        return ConnectionState.COMPLETED
    if target.status == StepStatus.IN_PROGRESS:
        return ConnectionState.ACTIVE
    return ConnectionState.PENDING


class GraphState:
    """Ordered steps, their nodes and the connections between them.

    Only one workflow generation is held at a time. ``initialize`` always
    clears the previous generation before installing the new one.
    """

    def __init__(self) -> None:
        self._order: List[str] = []
        self._nodes: Dict[str, Node] = {}
        self._connections: List[Connection] = []
        self._has_workflow = False
        self.generation = 0

    @property
    def has_workflow(self) -> bool:
        return self._has_workflow

    @property
    def steps(self) -> List[Step]:
        return [self._nodes[step_id].step for step_id in self._order]

    def __len__(self) -> int:
        return len(self._order)

    # ------------------------------------------------------------------
    def initialize(
        self, steps: Sequence[Step], positions: Sequence[Position]
    ) -> List[Node]:
        """Replace the current workflow with ``steps``.

        Raises:
            ValueError: If step ids repeat or positions do not match steps.
        """
        if len(steps) != len(positions):
            raise ValueError(
                f"got {len(positions)} positions for {len(steps)} steps"
            )
        ids = [step.id for step in steps]
        if len(set(ids)) != len(ids):
            raise ValueError("step ids must be unique within a workflow")

        self.clear()
        self.generation += 1

        for index, (step, position) in enumerate(zip(steps, positions)):
            node = Node(step=step.model_copy(deep=True), index=index, position=position)
            self._nodes[step.id] = node
            self._order.append(step.id)

        self._has_workflow = True
        self.rebuild_connections()
        logger.debug(
            f"Installed workflow generation {self.generation} with {len(ids)} steps"
        )
        return self.nodes_in_order()

    def clear(self) -> Tuple[List[Node], List[Connection]]:
        """Drop all nodes and connections, returning what was dropped."""
        nodes = self.nodes_in_order()
        connections = self._connections
        self._order = []
        self._nodes = {}
        self._connections = []
        self._has_workflow = False
        return nodes, connections

    def set_status(
        self, step_id: str, status: str, data: Any = None
    ) -> Optional[Node]:
        """Set a step's status and recompute every connection state.

        Returns the updated node, or ``None`` when ``step_id`` is unknown.
        """
        node = self._nodes.get(step_id)
        if node is None:
            logger.warning(f"Ignoring status '{status}' for unknown step {step_id}")
            return None

        node.step.status = status
        if data is not None:
            node.step.data = data
        self._recompute_connections()
        return node

    def get_node(self, step_id: str) -> Optional[Node]:
        return self._nodes.get(step_id)

    def nodes_in_order(self) -> List[Node]:
        return [self._nodes[step_id] for step_id in self._order]

    def connections(self) -> List[Connection]:
        return list(self._connections)

    def reposition(self, positions: Sequence[Position]) -> None:
        """Assign new positions to nodes, in workflow order."""
        if len(positions) != len(self._order):
            raise ValueError(
                f"got {len(positions)} positions for {len(self._order)} nodes"
            )
        for step_id, position in zip(self._order, positions):
            self._nodes[step_id].position = position

    def rebuild_connections(self) -> List[Connection]:
        """Recreate connections from the current step order.

        Returns the connections that were discarded.
        """
        discarded = self._connections
        self._connections = []
        for source_id, target_id in zip(self._order, self._order[1:]):
            if source_id in self._nodes and target_id in self._nodes:
                self._connections.append(
                    Connection(source_id=source_id, target_id=target_id)
                )
        self._recompute_connections()
        return discarded

    def _recompute_connections(self) -> None:
        for connection in self._connections:
            connection.state = derive_connection_state(
                self._nodes[connection.source_id].step,
                self._nodes[connection.target_id].step,
            )
