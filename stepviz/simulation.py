"""Scripted workflow playback.

Synthesizes the same wire events a real workflow server sends and feeds them
through an :class:`EventDispatcher`, so the visualization can be demoed
without any server.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Iterator, List, Optional, Sequence, Tuple

from .contracts import Step, StepCompleteEvent, StepStartEvent, WorkflowInitEvent
from .dispatch import EventDispatcher

logger = logging.getLogger(__name__)

DEMO_STEPS: List[Step] = [
    Step(id="start", name="Initialize", description="Load config, authenticate, connect database"),
    Step(id="process", name="Data Processing", description="Fetch, clean and filter data"),
    Step(id="validation", name="Validation", description="Schema check and business rules"),
    Step(id="transform", name="Transform", description="Format output and enrich data"),
    Step(id="output", name="Output", description="Save results and send notifications"),
]


class ScriptedWorkflow:
    """Fixed-timer workflow run.

    Args:
        steps: Steps to announce in the initial ``WORKFLOW_INIT``.
        step_delay: Seconds a step spends in progress before completing.
        pause: Seconds between one step completing and the next starting.
    """

    def __init__(
        self,
        steps: Optional[Sequence[Step]] = None,
        step_delay: float = 0.8,
        pause: float = 0.6,
    ) -> None:
        self.steps = list(steps if steps is not None else DEMO_STEPS)
        self.step_delay = step_delay
        self.pause = pause

    def events(self) -> Iterator[Tuple[float, str]]:
        """Yield ``(delay_before, message)`` pairs in playback order."""
        yield 0.0, WorkflowInitEvent(steps=self.steps).to_json()
        for index, step in enumerate(self.steps):
            yield (self.pause if index else 0.0), StepStartEvent(step_id=step.id).to_json()
            yield self.step_delay, StepCompleteEvent(
                step_id=step.id, data={"step": step.name}
            ).to_json()

    async def play(
        self,
        dispatcher: EventDispatcher,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> int:
        """Feed every event to ``dispatcher``; returns how many were sent."""
        sent = 0
        for delay, message in self.events():
            if delay:
                await sleep(delay)
            dispatcher.handle_message(message)
            sent += 1
        logger.info(f"Scripted workflow finished after {sent} events")
        return sent
