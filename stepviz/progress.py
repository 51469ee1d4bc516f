"""Completion metrics for the active workflow."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel

from .contracts import StepStatus
from .graph import GraphState

if TYPE_CHECKING:
    from .scene import BaseScene


class ProgressReport(BaseModel):
    completed_count: int = 0
    total_count: int = 0
    percentage: float = 0.0
    text: str = "0 of 0 steps completed"


class ProgressTracker:
    """Derives a progress report from the graph state."""

    def __init__(self, state: GraphState, scene: Optional["BaseScene"] = None) -> None:
        self._state = state
        self._scene = scene
        self.last_report = ProgressReport()

    def report(self) -> ProgressReport:
        steps = self._state.steps
        total = len(steps)
        completed = sum(1 for step in steps if step.status == StepStatus.COMPLETED)
        percentage = (completed / total) * 100 if total else 0.0
        return ProgressReport(
            completed_count=completed,
            total_count=total,
            percentage=percentage,
            text=f"{completed} of {total} steps completed",
        )

    def refresh(self) -> ProgressReport:
        """Recompute the report and push it to the scene."""
        self.last_report = self.report()
        if self._scene is not None:
            self._scene.set_progress(self.last_report)
        return self.last_report
