"""ワイヤレス ADB のペアリング・接続・切断

adb は失敗しても exit status 0 を返すことがあるため、pair / connect の成否は
出力に含まれる文言（大文字小文字を無視した部分一致）でも判定する。
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from viture_deployer.models.device import DEFAULT_ADB_PORT, ConnectionState
from viture_deployer.models.result import OperationResult
from viture_deployer.services.adb import AdbClient
from viture_deployer.services.device_registry import DeviceRegistry
from viture_deployer.services.discovery import Discovery
from viture_deployer.services.settings_store import SettingsStore

logger = logging.getLogger(__name__)

PAIRED_PHRASE = "Successfully paired"
CONNECTED_PHRASES = ("connected", "already connected")
DEFAULT_DEVICE_NAME = "Device"


class ConnectionWorkflow:
    """現在の接続先 (serial) を 1 つだけ管理する

    新しい接続に成功すると current serial は置き換わる。古い接続を adb 側で
    切断することはしない。
    """

    def __init__(
        self,
        adb: AdbClient,
        store: SettingsStore,
        registry: DeviceRegistry,
        discovery: Discovery,
    ):
        self._adb = adb
        self._store = store
        self._registry = registry
        self._discovery = discovery

        self.state = ConnectionState.DISCONNECTED
        self.serial: Optional[str] = None

        self._on_disconnected: list[Callable[[], None]] = []

    @property
    def is_connected(self) -> bool:
        return self.state == ConnectionState.CONNECTED and self.serial is not None

    def on_disconnected(self, callback: Callable[[], None]) -> None:
        """切断時に呼ぶコールバックを登録（デバイス単位のキャッシュ破棄用）"""
        self._on_disconnected.append(callback)

    def _settle(self) -> None:
        self.state = ConnectionState.CONNECTED if self.serial else ConnectionState.DISCONNECTED

    async def pair(self, address: str, port: int, code: str) -> OperationResult:
        settings = self._store.settings
        settings.pair_address = address
        settings.pair_port = port

        logger.info(f"Pairing with {address}:{port}...")
        self.state = ConnectionState.PAIRING
        try:
            result = await self._adb.pair(address, port, code)
        finally:
            # ペアリング自体は接続状態を変えない
            self._settle()

        if result.succeeded and result.contains(PAIRED_PHRASE):
            logger.info(f"✓ {result.output}")
            settings.connect_address = address
            self._store.save()
            return OperationResult.ok(result.output)

        logger.error(f"✗ Pairing failed: {result.output}")
        self._store.save()
        return OperationResult.failed(result.output)

    async def connect(
        self,
        address: str,
        port: int = DEFAULT_ADB_PORT,
        name: str = DEFAULT_DEVICE_NAME,
    ) -> OperationResult:
        settings = self._store.settings
        settings.connect_address = address
        settings.connect_port = port

        logger.info(f"Connecting to {address}:{port}...")
        self.state = ConnectionState.CONNECTING
        try:
            result = await self._adb.connect(address, port)
        finally:
            self._settle()

        if result.succeeded and any(result.contains(p) for p in CONNECTED_PHRASES):
            self.serial = f"{address}:{port}"
            self.state = ConnectionState.CONNECTED
            logger.info(f"✓ {result.output}")
            # upsert が settings.json を保存する
            self._registry.upsert(name, address, port)
            return OperationResult.ok(result.output)

        logger.error(f"✗ Connection failed: {result.output}")
        self._store.save()
        return OperationResult.failed(result.output)

    async def disconnect(self, serial: Optional[str] = None) -> OperationResult:
        """Best-effort disconnect followed by a fresh scan.

        `serial` defaults to the current connection.
        """
        target = serial or self.serial
        if not target:
            return OperationResult.skipped("Not connected")

        logger.info(f"Disconnecting from {target}...")
        await self._adb.disconnect(target)

        if target == self.serial:
            self.serial = None
            self.state = ConnectionState.DISCONNECTED
            for callback in self._on_disconnected:
                try:
                    callback()
                except Exception as e:
                    logger.error(f"Error in on_disconnected callback: {e}")

        logger.info("✓ Disconnected")
        await self._discovery.scan()
        return OperationResult.ok(f"Disconnected from {target}")

    def to_dict(self) -> dict:
        return {"state": self.state.value, "serial": self.serial}
