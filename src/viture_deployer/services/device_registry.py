"""デバイスレジストリ - 接続に成功したデバイスの永続リスト"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from viture_deployer.models.settings import SavedDevice
from viture_deployer.services.settings_store import SettingsStore

logger = logging.getLogger(__name__)


class DeviceRegistry:
    """address をキーに SavedDevice を管理する

    実体は SettingsStore.settings.devices。変更のたびに保存する。
    """

    def __init__(self, store: SettingsStore):
        self._store = store

    @property
    def devices(self) -> list[SavedDevice]:
        return self._store.settings.devices

    def __len__(self) -> int:
        return len(self.devices)

    def get(self, address: str) -> Optional[SavedDevice]:
        return next((d for d in self.devices if d.address == address), None)

    def upsert(self, name: str, address: str, port: int) -> SavedDevice:
        now = datetime.now().isoformat()
        device = self.get(address)
        if device is not None:
            device.port = port
            device.last_connected = now
        else:
            device = SavedDevice(name=name, address=address, port=port, last_connected=now)
            self.devices.append(device)
            logger.info(f"Saved device {name} ({address}:{port})")

        self.save()
        return device

    def remove(self, address: str) -> int:
        before = len(self.devices)
        self._store.settings.devices = [d for d in self.devices if d.address != address]
        removed = before - len(self.devices)
        if removed:
            logger.info(f"Removed saved device {address}")

        self.save()
        return removed

    def most_recent(self) -> Optional[SavedDevice]:
        most_recent: Optional[SavedDevice] = None
        for device in self.devices:
            if most_recent is None or device.last_connected_at > most_recent.last_connected_at:
                most_recent = device
        return most_recent

    def by_recency(self) -> list[SavedDevice]:
        """Records ordered by last-connected, most recent first."""
        return sorted(self.devices, key=lambda d: d.last_connected_at, reverse=True)

    def load(self) -> None:
        self._store.load()

    def save(self) -> None:
        self._store.save()
