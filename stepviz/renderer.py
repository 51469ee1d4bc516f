"""Materializes graph state onto a scene."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .config import RenderConfig
from .contracts import Step
from .graph import GraphState, Node
from .layout import calculate_layout, connection_path
from .scene import BaseScene
from .scheduling import BaseScheduler, TimerHandle

logger = logging.getLogger(__name__)


class Renderer:
    """Creates, updates and tears down node and connection visuals."""

    def __init__(
        self,
        state: GraphState,
        scene: BaseScene,
        scheduler: BaseScheduler,
        config: Optional[RenderConfig] = None,
    ) -> None:
        config = config or RenderConfig()
        self._state = state
        self._scene = scene
        self._scheduler = scheduler
        self.stagger_interval = config.stagger_interval
        self.info_reveal_delay = config.info_reveal_delay
        self._timers: List[TimerHandle] = []

    def render_workflow(self, steps: Sequence[Step]) -> List[Node]:
        """Replace whatever is on screen with a fresh workflow."""
        self.clear()
        positions = self._layout(len(steps))
        nodes = self._state.initialize(steps, positions)

        for node in nodes:
            node.handle = self._scene.add_node(node.step, node.position)
            self._schedule(node.index * self.stagger_interval, self._reveal(node))

        self._add_connections()
        logger.info(f"Rendered workflow with {len(nodes)} steps")
        return nodes

    def update_node(self, node: Node) -> None:
        if node.handle is not None:
            self._scene.update_node_status(node.handle, node.step.status)

    def sync_connections(self) -> None:
        """Push every connection's derived state to the scene."""
        for connection in self._state.connections():
            if connection.handle is not None:
                self._scene.update_connection_state(connection.handle, connection.state)

    def relayout(self) -> None:
        """Reposition nodes for the current viewport and redraw connections."""
        if not self._state.has_workflow:
            return
        self._state.reposition(self._layout(len(self._state)))
        for node in self._state.nodes_in_order():
            if node.handle is not None:
                self._scene.move_node(node.handle, node.position)

        for connection in self._state.rebuild_connections():
            self._release_connection(connection)
        self._add_connections()
        logger.debug("Relayout complete")

    def cancel_pending(self) -> None:
        """Cancel entrance and info-reveal timers that have not fired yet."""
        for timer in self._timers:
            timer.cancel()
        self._timers = []

    def clear(self) -> None:
        """Remove all visuals and drop the current workflow."""
        self.cancel_pending()

        nodes, connections = self._state.clear()
        for connection in connections:
            self._release_connection(connection)
        for node in nodes:
            if node.handle is not None:
                self._scene.remove_node(node.handle)
                node.handle = None

    def show_workflow_info(self) -> None:
        self._schedule(self.info_reveal_delay, self._scene.show_workflow_info)

    # ------------------------------------------------------------------
    def _layout(self, count: int):
        if count == 0:
            return []
        width, height = self._scene.viewport_size()
        return calculate_layout(count, width, height)

    def _add_connections(self) -> None:
        for connection in self._state.connections():
            source = self._state.get_node(connection.source_id)
            target = self._state.get_node(connection.target_id)
            path = connection_path(source.position, target.position)
            connection.handle = self._scene.add_connection(path, connection.state)

    def _release_connection(self, connection) -> None:
        if connection.handle is not None:
            self._scene.remove_connection(connection.handle)
            connection.handle = None

    def _reveal(self, node: Node):
        def reveal() -> None:
            if node.handle is not None:
                self._scene.reveal_node(node.handle)

        return reveal

    def _schedule(self, delay: float, callback) -> None:
        self._timers.append(self._scheduler.call_later(delay, callback))
