"""End-to-end tests for the visualization wiring."""

import asyncio
import contextlib
import json
import os
import signal

import pytest

from stepviz.config import StepvizConfig
from stepviz.connection import ConnectionStatus
from stepviz.layout import calculate_layout
from stepviz.transports import InMemoryTransport
from stepviz.visualization import WorkflowVisualization


@pytest.fixture
def transport():
    return InMemoryTransport()


@pytest.fixture
def viz(transport, scene, scheduler):
    return WorkflowVisualization(transport, scene, scheduler=scheduler, config=StepvizConfig())


def _init(steps):
    return json.dumps({"type": "WORKFLOW_INIT", "steps": [s.model_dump() for s in steps]})


@pytest.mark.asyncio
async def test_stream_drives_graph(viz, transport, scene, settle, make_steps):
    viz.start()
    steps = make_steps(3)
    transport.feed(_init(steps))
    for step in steps:
        transport.feed(json.dumps({"type": "STEP_START", "stepId": step.id}))
        transport.feed(json.dumps({"type": "STEP_COMPLETE", "stepId": step.id}))
    await settle()

    assert viz.status == ConnectionStatus.CONNECTED
    assert scene.connection_status == "connected"
    assert scene.status_history[0] == "connecting"
    assert len(scene.nodes) == 3
    assert viz.progress().percentage == 100
    assert scene.progress.text == "3 of 3 steps completed"
    await viz.stop()


@pytest.mark.asyncio
async def test_bad_frames_do_not_drop_connection(viz, transport, settle, make_steps):
    viz.start()
    transport.feed("definitely not json")
    transport.feed('{"type": "SOMETHING_NEW"}')
    transport.feed(_init(make_steps(2)))
    await settle()

    assert viz.state.has_workflow
    assert viz.status == ConnectionStatus.CONNECTED
    assert transport.connect_attempts == 1
    assert viz.dispatcher.decode_failures == 1
    assert viz.dispatcher.events_ignored == 1
    await viz.stop()


@pytest.mark.asyncio
async def test_graph_survives_reconnect(viz, transport, scene, scheduler, settle, make_steps):
    viz.start()
    transport.feed(_init(make_steps(2)))
    transport.feed('{"type": "STEP_COMPLETE", "stepId": "s1"}')
    await settle()

    transport.close_remote()
    await settle()
    assert scene.connection_status == "disconnected"
    assert len(scene.nodes) == 2

    scheduler.advance(3.0)
    await settle()
    transport.feed('{"type": "STEP_COMPLETE", "stepId": "s2"}')
    await settle()

    assert scene.connection_status == "connected"
    assert viz.progress().percentage == 100
    await viz.stop()


@pytest.mark.asyncio
async def test_resize_burst_relayouts_once(viz, transport, scene, scheduler, settle, make_steps):
    viz.start()
    transport.feed(_init(make_steps(4)))
    await settle()

    scene.resize(900, 700)
    for _ in range(5):
        viz.notify_resize()
        scheduler.advance(0.1)
    assert viz.relayouts == 0

    scheduler.advance(0.2)
    assert viz.relayouts == 1
    positions = [scene.nodes[n.handle].position for n in viz.state.nodes_in_order()]
    assert positions == calculate_layout(4, 900, 700)
    assert len(scene.connections) == 3
    await viz.stop()


@pytest.mark.asyncio
async def test_resize_without_workflow_is_ignored(viz, scheduler):
    viz.notify_resize()
    scheduler.advance(1)
    assert viz.relayouts == 0


@pytest.mark.asyncio
async def test_stop_cancels_pending_timers(viz, transport, scene, scheduler, settle, make_steps):
    viz.start()
    transport.feed(_init(make_steps(3)))
    await settle()
    viz.notify_resize()

    await viz.stop()
    scheduler.advance(10)
    await settle()

    assert viz.relayouts == 0
    assert not scene.workflow_info_visible
    assert transport.connect_attempts == 1
    assert scene.connection_status == "disconnected"


@pytest.mark.asyncio
async def test_manual_reconnect_from_facade(viz, transport, scene, scheduler, settle):
    viz.start()
    await settle()

    viz.reconnect()
    assert scene.connection_status == "connecting"
    scheduler.advance(0.5)
    await settle()

    assert transport.connect_attempts == 2
    assert scene.connection_status == "connected"
    await viz.stop()


@pytest.mark.asyncio
@pytest.mark.skipif(not hasattr(signal, "SIGHUP"), reason="SIGHUP is not available")
async def test_reconnect_signal_triggers_manual_reconnect(viz, transport, scene, settle):
    task = asyncio.ensure_future(viz.run(reconnect_signal=signal.SIGHUP))
    await settle()
    assert scene.connection_status == "connected"

    os.kill(os.getpid(), signal.SIGHUP)
    await asyncio.sleep(0.05)
    await settle()

    assert scene.connection_status == "connecting"
    assert transport.disconnects == 1
    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task


@pytest.mark.asyncio
@pytest.mark.skipif(not hasattr(signal, "SIGHUP"), reason="SIGHUP is not available")
async def test_reconnect_signal_handler_removed_after_run(viz):
    await viz.run(lifespan=0.01, reconnect_signal=signal.SIGHUP)

    loop = asyncio.get_running_loop()
    assert not loop.remove_signal_handler(signal.SIGHUP)
    assert viz.status == ConnectionStatus.DISCONNECTED
