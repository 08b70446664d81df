from __future__ import annotations

import asyncio

import pytest

from viture_deployer.models.device import ConnectionState
from viture_deployer.models.settings import SavedDevice


@pytest.mark.asyncio
async def test_pair_success_prefills_connect_address(context, runner) -> None:
    runner.respond("pair", True, "Successfully paired to 192.168.1.20:37123 [guid=adb-XYZ]")

    result = await context.connection.pair("192.168.1.20", 37123, "123456")

    assert result.succeeded
    assert context.connection.state == ConnectionState.DISCONNECTED
    assert context.settings.connect_address == "192.168.1.20"
    assert context.settings.pair_port == 37123
    assert runner.commands == ["pair"]


@pytest.mark.asyncio
async def test_pair_exit_zero_without_phrase_is_failure(context, runner) -> None:
    runner.respond("pair", True, "Failed: Wrong password or connection was dropped.")

    result = await context.connection.pair("192.168.1.20", 37123, "000000")

    assert not result.succeeded
    assert result.message == "Failed: Wrong password or connection was dropped."
    assert context.settings.connect_address == "192.168.", "connect address must not change"


@pytest.mark.asyncio
async def test_pair_phrase_is_case_insensitive(context, runner) -> None:
    runner.respond("pair", True, "SUCCESSFULLY PAIRED to 192.168.1.20:37123")
    assert (await context.connection.pair("192.168.1.20", 37123, "123456")).succeeded


@pytest.mark.asyncio
async def test_connect_success_upserts_registry(context, runner) -> None:
    runner.respond("connect", True, "connected to 192.168.1.20:5555")

    result = await context.connection.connect("192.168.1.20", 5555)

    assert result.succeeded
    assert context.connection.state == ConnectionState.CONNECTED
    assert context.connection.serial == "192.168.1.20:5555"
    assert [d.serial for d in context.registry.devices] == ["192.168.1.20:5555"]


@pytest.mark.asyncio
async def test_already_connected_counts_as_success(context, runner) -> None:
    runner.respond("connect", True, "already connected to 192.168.1.20:5555")
    assert (await context.connection.connect("192.168.1.20", 5555)).succeeded


@pytest.mark.asyncio
async def test_connect_failure_does_not_upsert(context, runner) -> None:
    runner.respond("connect", True, "failed to connect to '192.168.1.99:5555': Connection refused")

    result = await context.connection.connect("192.168.1.99", 5555)

    assert not result.succeeded
    assert result.message.startswith("failed to connect")
    assert context.connection.state == ConnectionState.DISCONNECTED
    assert context.connection.serial is None
    assert len(context.registry) == 0


@pytest.mark.asyncio
async def test_connect_non_zero_exit_is_failure(context, runner) -> None:
    runner.respond("connect", False, "connected? no")
    assert not (await context.connection.connect("192.168.1.20", 5555)).succeeded
    assert len(context.registry) == 0


@pytest.mark.asyncio
async def test_new_connect_replaces_active_serial_without_disconnect(context, runner) -> None:
    runner.respond("connect", True, "connected")
    await context.connection.connect("192.168.1.20", 5555)
    await context.connection.connect("192.168.1.21", 5555)

    assert context.connection.serial == "192.168.1.21:5555"
    assert "disconnect" not in runner.commands


@pytest.mark.asyncio
async def test_failed_connect_keeps_previous_connection(context, runner) -> None:
    runner.respond("connect", True, "connected to 192.168.1.20:5555")
    runner.respond("connect", False, "failed to connect")
    await context.connection.connect("192.168.1.20", 5555)
    await context.connection.connect("192.168.1.21", 5555)

    assert context.connection.state == ConnectionState.CONNECTED
    assert context.connection.serial == "192.168.1.20:5555"


@pytest.mark.asyncio
async def test_disconnect_clears_inventory_and_rescans(context, runner) -> None:
    runner.respond("connect", True, "connected")
    runner.respond("pm", True, "package:com.viture.demo")
    runner.respond("disconnect", False, "error: no such device")
    await context.connection.connect("192.168.1.20", 5555)
    await context.inventory.refresh("192.168.1.20:5555")
    assert context.inventory.apps

    result = await context.connection.disconnect()

    assert result.succeeded, "disconnect ignores the tool's own result"
    assert context.connection.state == ConnectionState.DISCONNECTED
    assert context.connection.serial is None
    assert context.inventory.apps == []
    assert runner.commands[-2:] == ["disconnect", "devices"]
    assert runner.calls_for("disconnect") == [("disconnect", "192.168.1.20:5555")]


@pytest.mark.asyncio
async def test_disconnect_when_not_connected(context, runner) -> None:
    result = await context.connection.disconnect()
    assert not result.succeeded
    assert result.precondition
    assert runner.calls == []


@pytest.mark.asyncio
async def test_connect_refreshes_existing_record_in_place(context, runner) -> None:
    context.store.settings.devices = [
        SavedDevice(name="Neckband", address="192.168.1.20", port=5555, last_connected="2020-01-01T00:00:00")
    ]
    runner.respond("connect", True, "connected")

    await context.connection.connect("192.168.1.20", 40111)

    assert len(context.registry) == 1
    device = context.registry.get("192.168.1.20")
    assert device.port == 40111
    assert device.name == "Neckband"
    assert device.last_connected > "2020-01-01T00:00:00"


@pytest.mark.asyncio
async def test_scan_while_connect_in_flight(context, runner) -> None:
    context.settings.devices = [
        SavedDevice(name="Neckband", address="192.168.1.20", port=5555, last_connected="2020-01-01T00:00:00")
    ]
    runner.respond("connect", True, "connected to 192.168.1.20:5555")
    runner.respond(
        "devices", True, "List of devices attached\n192.168.1.20:5555\tdevice\n192.168.1.30:41234\tdevice\n"
    )
    gate = runner.hold("connect")

    connecting = asyncio.create_task(context.connection.connect("192.168.1.20", 5555, name="Neckband"))
    await asyncio.sleep(0)
    assert context.connection.state == ConnectionState.CONNECTING

    candidates = await context.discovery.scan()
    assert context.connection.state == ConnectionState.CONNECTING
    assert [c.serial for c in candidates] == ["192.168.1.20:5555", "192.168.1.30:41234"]
    assert candidates[0].from_registry and candidates[0].is_connected

    gate.set()
    result = await connecting

    assert result.succeeded
    assert context.connection.state == ConnectionState.CONNECTED
    assert context.connection.serial == "192.168.1.20:5555"
    assert len(context.registry) == 1
    assert context.registry.get("192.168.1.20").last_connected > "2020-01-01T00:00:00"

    rescanned = await context.discovery.scan()
    assert [c.serial for c in rescanned] == ["192.168.1.20:5555", "192.168.1.30:41234"]
