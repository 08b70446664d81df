from __future__ import annotations

import json
from datetime import datetime

from viture_deployer.models.settings import SavedDevice
from viture_deployer.services.device_registry import DeviceRegistry
from viture_deployer.services.settings_store import SettingsStore


def test_upsert_same_address_keeps_one_record(store, settings_path) -> None:
    registry = DeviceRegistry(store)
    registry.upsert("Neckband", "192.168.1.20", 5555)
    registry.upsert("Other", "192.168.1.20", 41234)
    registry.upsert("Again", "192.168.1.20", 40000)

    assert len(registry) == 1
    device = registry.get("192.168.1.20")
    assert device is not None
    assert device.port == 40000
    # name is kept from the first insert
    assert device.name == "Neckband"
    assert device.last_connected

    saved = json.loads(settings_path.read_text(encoding="utf-8"))
    assert len(saved["SavedDevices"]) == 1
    assert saved["SavedDevices"][0]["Port"] == "40000"


def test_remove_deletes_all_records_for_address(store) -> None:
    store.settings.devices = [
        SavedDevice(name="a", address="10.0.0.1", port=5555),
        SavedDevice(name="b", address="10.0.0.2", port=5555),
        SavedDevice(name="c", address="10.0.0.1", port=6666),
    ]
    registry = DeviceRegistry(store)

    assert registry.remove("10.0.0.1") == 2
    assert [d.address for d in registry.devices] == ["10.0.0.2"]
    assert registry.remove("10.0.0.9") == 0


def test_most_recent_empty(store) -> None:
    assert DeviceRegistry(store).most_recent() is None


def test_most_recent_picks_latest_timestamp(store) -> None:
    store.settings.devices = [
        SavedDevice(name="t1", address="10.0.0.1", last_connected="2026-01-01T10:00:00"),
        SavedDevice(name="t3", address="10.0.0.3", last_connected="2026-03-01T10:00:00"),
        SavedDevice(name="t2", address="10.0.0.2", last_connected="2026-02-01T10:00:00"),
    ]
    assert DeviceRegistry(store).most_recent().name == "t3"


def test_unparsable_timestamps_never_win(store) -> None:
    store.settings.devices = [
        SavedDevice(name="broken", address="10.0.0.1", last_connected="yesterday-ish"),
        SavedDevice(name="absent", address="10.0.0.2"),
        SavedDevice(name="old", address="10.0.0.3", last_connected="2001-01-01T00:00:00"),
    ]
    assert DeviceRegistry(store).most_recent().name == "old"


def test_most_recent_tie_keeps_first(store) -> None:
    store.settings.devices = [
        SavedDevice(name="first", address="10.0.0.1", last_connected="2026-01-01T10:00:00"),
        SavedDevice(name="second", address="10.0.0.2", last_connected="2026-01-01T10:00:00"),
    ]
    assert DeviceRegistry(store).most_recent().name == "first"


def test_timezone_aware_timestamps_compare_with_naive(store) -> None:
    store.settings.devices = [
        SavedDevice(name="naive", address="10.0.0.1", last_connected="2020-01-01T10:00:00"),
        SavedDevice(name="aware", address="10.0.0.2", last_connected="2026-01-01T10:00:00+09:00"),
    ]
    assert DeviceRegistry(store).most_recent().name == "aware"


def test_out_of_range_offset_timestamp_compares_as_minimum(store) -> None:
    store.settings.devices = [
        SavedDevice(name="edge", address="10.0.0.1", last_connected="0001-01-01T00:00:00+09:00"),
        SavedDevice(name="old", address="10.0.0.2", last_connected="2001-01-01T00:00:00"),
    ]
    registry = DeviceRegistry(store)
    assert store.settings.devices[0].last_connected_at == datetime.min
    assert registry.most_recent().name == "old"
    assert [d.name for d in registry.by_recency()] == ["old", "edge"]


def test_dotnet_round_trip_timestamps_are_parsed(store) -> None:
    store.settings.devices = [
        SavedDevice(name="utc", address="10.0.0.1", last_connected="2026-01-01T10:00:00.1234567Z"),
        SavedDevice(name="local", address="10.0.0.2", last_connected="2025-01-01T10:00:00.1234567"),
    ]
    utc, local = store.settings.devices
    assert local.last_connected_at == datetime(2025, 1, 1, 10, 0, 0, 123456)
    assert utc.last_connected_at > local.last_connected_at
    assert DeviceRegistry(store).most_recent().name == "utc"


def test_by_recency_orders_most_recent_first(store) -> None:
    store.settings.devices = [
        SavedDevice(name="t1", address="10.0.0.1", last_connected="2026-01-01T10:00:00"),
        SavedDevice(name="none", address="10.0.0.4"),
        SavedDevice(name="t3", address="10.0.0.3", last_connected="2026-03-01T10:00:00"),
    ]
    assert [d.name for d in DeviceRegistry(store).by_recency()] == ["t3", "t1", "none"]


def test_registry_survives_reload(settings_path) -> None:
    registry = DeviceRegistry(SettingsStore.open(settings_path))
    registry.upsert("Neckband", "192.168.1.20", 5555)

    reloaded = DeviceRegistry(SettingsStore.open(settings_path))
    assert reloaded.most_recent().serial == "192.168.1.20:5555"
