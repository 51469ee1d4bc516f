"""Scripted workflow playback tests."""

import json

import pytest

from stepviz.simulation import DEMO_STEPS, ScriptedWorkflow


def test_events_follow_wire_protocol():
    script = ScriptedWorkflow()
    events = [json.loads(message) for _, message in script.events()]

    assert len(events) == 1 + 2 * len(DEMO_STEPS)
    assert events[0]["type"] == "WORKFLOW_INIT"
    assert [s["id"] for s in events[0]["steps"]] == [s.id for s in DEMO_STEPS]
    assert events[1] == {"type": "STEP_START", "stepId": "start"}
    assert events[2]["type"] == "STEP_COMPLETE"
    assert events[2]["stepId"] == "start"
    assert events[-1]["stepId"] == "output"


@pytest.mark.asyncio
async def test_play_feeds_dispatcher(pipeline, scene):
    _, _, tracker, dispatcher = pipeline
    delays = []

    async def fake_sleep(delay):
        delays.append(delay)

    script = ScriptedWorkflow(step_delay=0.8, pause=0.6)
    sent = await script.play(dispatcher, sleep=fake_sleep)

    assert sent == 11
    assert tracker.report().percentage == 100
    assert scene.progress.text == "5 of 5 steps completed"
    assert sum(delays) == pytest.approx(5 * 0.8 + 4 * 0.6)


@pytest.mark.asyncio
async def test_custom_steps(pipeline, make_steps):
    state, _, _, dispatcher = pipeline

    async def no_sleep(delay):
        pass

    await ScriptedWorkflow(steps=make_steps(2)).play(dispatcher, sleep=no_sleep)

    assert [step.status for step in state.steps] == ["completed", "completed"]
    assert state.get_node("s1").step.data == {"step": "Step 1"}
