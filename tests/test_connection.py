"""Connection manager lifecycle tests."""

import pytest

from stepviz.config import ConnectionConfig
from stepviz.connection import ConnectionManager, ConnectionStatus
from stepviz.transports import InMemoryTransport


@pytest.fixture
def transport():
    return InMemoryTransport()


@pytest.fixture
def received():
    return []


@pytest.fixture
def statuses():
    return []


@pytest.fixture
def manager(transport, scheduler, received, statuses):
    return ConnectionManager(
        transport,
        on_message=received.append,
        scheduler=scheduler,
        config=ConnectionConfig(),
        on_status=statuses.append,
    )


@pytest.mark.asyncio
async def test_connects_and_delivers_messages(manager, transport, received, statuses, settle):
    manager.start()
    await settle()

    assert manager.status == ConnectionStatus.CONNECTED
    assert statuses == ["connecting", "connected"]

    transport.feed("one")
    transport.feed("two")
    await settle()
    assert received == ["one", "two"]
    await manager.stop()


@pytest.mark.asyncio
async def test_close_schedules_single_reconnect(manager, transport, scheduler, settle):
    manager.start()
    await settle()

    transport.close_remote()
    await settle()
    assert manager.status == ConnectionStatus.DISCONNECTED
    assert scheduler.pending == 1

    scheduler.advance(2.5)
    await settle()
    assert transport.connect_attempts == 1

    scheduler.advance(1.0)
    await settle()
    assert transport.connect_attempts == 2
    assert manager.status == ConnectionStatus.CONNECTED
    assert scheduler.pending == 0
    await manager.stop()


@pytest.mark.asyncio
async def test_failed_connect_reports_error_then_retries_forever(
    manager, transport, scheduler, statuses, settle
):
    transport.fail_next_connect(times=3)
    manager.start()
    await settle()

    assert statuses == ["connecting", "error", "disconnected"]
    for _ in range(3):
        scheduler.advance(3.0)
        await settle()

    assert transport.connect_attempts == 4
    assert manager.attempts == 4
    assert manager.status == ConnectionStatus.CONNECTED
    assert statuses[-2:] == ["connecting", "connected"]
    await manager.stop()


@pytest.mark.asyncio
async def test_transport_error_is_followed_by_reconnect(
    manager, transport, scheduler, statuses, settle
):
    manager.start()
    await settle()

    transport.fail()
    await settle()
    assert statuses[-2:] == ["error", "disconnected"]
    assert scheduler.pending == 1

    scheduler.advance(3.0)
    await settle()
    assert manager.status == ConnectionStatus.CONNECTED
    await manager.stop()


@pytest.mark.asyncio
async def test_handler_failure_keeps_connection_open(transport, scheduler, settle):
    received = []

    def on_message(raw):
        if raw == "boom":
            raise RuntimeError("bad render")
        received.append(raw)

    manager = ConnectionManager(transport, on_message, scheduler=scheduler)
    manager.start()
    await settle()

    transport.feed("boom")
    transport.feed("after")
    await settle()

    assert received == ["after"]
    assert manager.status == ConnectionStatus.CONNECTED
    assert transport.connect_attempts == 1
    await manager.stop()


@pytest.mark.asyncio
async def test_manual_reconnect_while_connected(manager, transport, scheduler, settle):
    manager.start()
    await settle()

    manager.reconnect()
    assert manager.status == ConnectionStatus.CONNECTING
    await settle()
    assert transport.disconnects == 1
    assert manager.status == ConnectionStatus.CONNECTING

    scheduler.advance(0.4)
    await settle()
    assert transport.connect_attempts == 1

    scheduler.advance(0.2)
    await settle()
    assert transport.connect_attempts == 2
    assert manager.status == ConnectionStatus.CONNECTED

    # the superseded connection must not schedule its own reconnect
    scheduler.advance(10)
    await settle()
    assert transport.connect_attempts == 2
    await manager.stop()


@pytest.mark.asyncio
async def test_manual_reconnect_overrides_pending_reconnect(
    manager, transport, scheduler, settle
):
    manager.start()
    await settle()
    transport.close_remote()
    await settle()
    assert scheduler.pending == 1

    manager.reconnect()
    await settle()
    assert scheduler.pending == 1

    scheduler.advance(0.6)
    await settle()
    assert transport.connect_attempts == 2

    scheduler.advance(10)
    await settle()
    assert transport.connect_attempts == 2
    assert manager.status == ConnectionStatus.CONNECTED
    await manager.stop()


@pytest.mark.asyncio
async def test_repeated_manual_reconnect_opens_once(manager, transport, scheduler, settle):
    manager.start()
    await settle()

    manager.reconnect()
    manager.reconnect()
    manager.reconnect()
    await settle()
    scheduler.advance(1.0)
    await settle()

    assert transport.connect_attempts == 2
    assert manager.status == ConnectionStatus.CONNECTED
    await manager.stop()


@pytest.mark.asyncio
async def test_manual_reconnect_before_start(manager, transport, scheduler, settle):
    manager.reconnect()
    assert manager.status == ConnectionStatus.CONNECTING

    scheduler.advance(0.5)
    await settle()
    assert transport.connect_attempts == 1
    assert manager.status == ConnectionStatus.CONNECTED
    await manager.stop()


@pytest.mark.asyncio
async def test_stop_cancels_reconnects(manager, transport, scheduler, settle):
    manager.start()
    await settle()
    transport.close_remote()
    await settle()

    await manager.stop()
    scheduler.advance(30)
    await settle()

    assert manager.status == ConnectionStatus.DISCONNECTED
    assert transport.connect_attempts == 1
    assert not manager.running


@pytest.mark.asyncio
async def test_stop_while_connected_closes_transport(manager, transport, settle):
    manager.start()
    await settle()

    await manager.stop()

    assert manager.status == ConnectionStatus.DISCONNECTED
    assert not transport.connected
