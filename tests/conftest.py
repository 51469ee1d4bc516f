"""Shared fixtures for stepviz tests."""

import asyncio

import pytest

from stepviz.contracts import Step
from stepviz.dispatch import EventDispatcher
from stepviz.graph import GraphState
from stepviz.progress import ProgressTracker
from stepviz.renderer import Renderer
from stepviz.scene import InMemoryScene
from stepviz.scheduling import VirtualScheduler


@pytest.fixture
def make_steps():
    def _make(count, prefix="s"):
        return [
            Step(
                id=f"{prefix}{i + 1}",
                name=f"Step {i + 1}",
                description=f"Does thing {i + 1}",
            )
            for i in range(count)
        ]

    return _make


@pytest.fixture
def settle():
    """Let pending event-loop callbacks and tasks run."""

    async def _settle(rounds: int = 20) -> None:
        for _ in range(rounds):
            await asyncio.sleep(0)

    return _settle


@pytest.fixture
def scheduler():
    return VirtualScheduler()


@pytest.fixture
def scene():
    return InMemoryScene(width=1200, height=800)


@pytest.fixture
def pipeline(scheduler, scene):
    """Graph state, renderer, tracker and dispatcher bound to one scene."""
    state = GraphState()
    renderer = Renderer(state, scene, scheduler)
    tracker = ProgressTracker(state, scene)
    dispatcher = EventDispatcher(state, renderer, tracker)
    return state, renderer, tracker, dispatcher
