"""Routes decoded workflow events to graph mutations."""

from __future__ import annotations

import logging
from typing import Any, Optional

from .contracts import (
    StepCompleteEvent,
    StepStartEvent,
    StepStatus,
    UnknownEvent,
    WorkflowEvent,
    WorkflowInitEvent,
    parse_event,
)
from .errors import EventDecodeError
from .graph import GraphState, Node
from .progress import ProgressTracker
from .renderer import Renderer

logger = logging.getLogger(__name__)


class EventDispatcher:
    """Applies workflow events to the graph state and keeps visuals in sync."""

    def __init__(
        self, state: GraphState, renderer: Renderer, tracker: ProgressTracker
    ) -> None:
        self._state = state
        self._renderer = renderer
        self._tracker = tracker
        self.events_handled = 0
        self.events_ignored = 0
        self.decode_failures = 0

    def handle_message(self, raw: str | bytes) -> Optional[WorkflowEvent]:
        """Decode and apply one inbound message.

        Malformed messages are logged and dropped; this never raises for bad
        input so the connection stays up.
        """
        try:
            event = parse_event(raw)
        except EventDecodeError as e:
            self.decode_failures += 1
            logger.warning(f"Discarding undecodable message: {e}")
            return None
        self.handle_event(event)
        return event

    def handle_event(self, event: WorkflowEvent) -> None:
        logger.debug(f"Workflow event received: {event.type}")

        if isinstance(event, WorkflowInitEvent):
            self._initialize(event)
        elif isinstance(event, StepStartEvent):
            self._update_status(event.step_id, StepStatus.IN_PROGRESS)
        elif isinstance(event, StepCompleteEvent):
            self._update_status(event.step_id, StepStatus.COMPLETED, event.data)
        else:
            self.events_ignored += 1
            kind = event.type if isinstance(event, UnknownEvent) else type(event).__name__
            logger.info(f"Ignoring unknown event type: {kind}")
            return
        self.events_handled += 1

    def _initialize(self, event: WorkflowInitEvent) -> None:
        logger.info(f"Initializing workflow with {len(event.steps)} steps")
        self._renderer.render_workflow(event.steps)
        self._tracker.refresh()
        self._renderer.show_workflow_info()

    def _update_status(self, step_id: str, status: str, data: Any = None) -> Optional[Node]:
        node = self._state.set_status(step_id, status, data)
        if node is None:
            return None

        self._renderer.update_node(node)
        self._renderer.sync_connections()
        self._tracker.refresh()
        logger.info(f"Step {step_id}: {node.step.name} -> {status}")
        if data is not None:
            logger.debug(f"Step {step_id} data: {data}")
        return node
