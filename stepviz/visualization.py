"""Live workflow visualization wiring."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from .config import StepvizConfig, load_config
from .connection import ConnectionManager
from .dispatch import EventDispatcher
from .graph import GraphState
from .progress import ProgressReport, ProgressTracker
from .renderer import Renderer
from .scene import BaseScene
from .scheduling import AsyncioScheduler, BaseScheduler, Debouncer
from .transports import BaseTransport

logger = logging.getLogger(__name__)


class WorkflowVisualization:
    """Owns the graph state and every component that reads or mutates it.

    Example:
        >>> viz = WorkflowVisualization(get_transport(), get_scene())
        >>> await viz.run()
    """

    def __init__(
        self,
        transport: BaseTransport,
        scene: BaseScene,
        scheduler: Optional[BaseScheduler] = None,
        config: Optional[StepvizConfig] = None,
    ) -> None:
        config = config or load_config()
        self.scheduler = scheduler or AsyncioScheduler()
        self.scene = scene
        self.state = GraphState()
        self.renderer = Renderer(self.state, scene, self.scheduler, config.render)
        self.tracker = ProgressTracker(self.state, scene)
        self.dispatcher = EventDispatcher(self.state, self.renderer, self.tracker)
        self.connection = ConnectionManager(
            transport,
            on_message=self.dispatcher.handle_message,
            scheduler=self.scheduler,
            config=config.transport.connection,
            on_status=scene.set_connection_status,
        )
        self._resize = Debouncer(
            self.scheduler, config.render.resize_debounce, self._relayout
        )
        self.relayouts = 0

    @property
    def status(self) -> str:
        return self.connection.status

    def progress(self) -> ProgressReport:
        return self.tracker.report()

    def start(self) -> None:
        self.connection.start()

    def reconnect(self) -> None:
        self.connection.reconnect()

    def notify_resize(self) -> None:
        """Signal that the viewport changed size; relayout once the burst settles."""
        self._resize.trigger()

    async def stop(self) -> None:
        """Release the connection and cancel pending timers."""
        self._resize.cancel()
        self.renderer.cancel_pending()
        await self.connection.stop()

    async def run(
        self, lifespan: Optional[float] = None, reconnect_signal: Optional[int] = None
    ) -> None:
        """Run until cancelled, or for ``lifespan`` seconds when given.

        Args:
            lifespan: Seconds to run before stopping. Runs forever when None.
            reconnect_signal: Optional signal number (e.g. ``signal.SIGHUP``)
                that triggers a manual reconnect while running.
        """
        loop = asyncio.get_running_loop()
        if reconnect_signal is not None:
            loop.add_signal_handler(reconnect_signal, self.reconnect)
        self.start()
        try:
            if lifespan is None:
                await asyncio.Event().wait()
            else:
                await asyncio.sleep(lifespan)
        finally:
            if reconnect_signal is not None:
                loop.remove_signal_handler(reconnect_signal)
            await self.stop()

    def _relayout(self) -> None:
        if not self.state.has_workflow:
            return
        self.relayouts += 1
        self.renderer.relayout()
