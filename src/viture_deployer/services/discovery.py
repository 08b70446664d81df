"""デバイス探索 - レジストリと `adb devices` の結果を統合する"""

from __future__ import annotations

import logging

from viture_deployer.models.device import CandidateDevice, parse_serial
from viture_deployer.services.adb import AdbClient
from viture_deployer.services.device_registry import DeviceRegistry

logger = logging.getLogger(__name__)

LIVE_DEVICE_NAME = "Connected Device"


def parse_devices_output(output: str) -> list[tuple[str, int]]:
    """`adb devices` の出力から (address, port) を取り出す。

    ヘッダー行・デーモン起動メッセージ・device 以外の状態 (offline,
    unauthorized 等) の行は読み飛ばす。
    """
    entries: list[tuple[str, int]] = []
    for line in output.splitlines():
        line = line.strip()
        if not line or line.startswith("*") or line.lower().startswith("list of devices"):
            continue

        parts = line.split()
        if len(parts) < 2 or parts[1] != "device":
            continue

        parsed = parse_serial(parts[0])
        if parsed is None:
            logger.debug(f"Skipping unparsable device line: {line}")
            continue
        entries.append(parsed)
    return entries


class Discovery:
    """接続候補の一覧を作る"""

    def __init__(self, adb: AdbClient, registry: DeviceRegistry):
        self._adb = adb
        self._registry = registry
        self._candidates: list[CandidateDevice] = []

    @property
    def candidates(self) -> list[CandidateDevice]:
        """Result of the last scan."""
        return list(self._candidates)

    async def scan(self) -> list[CandidateDevice]:
        candidates = [
            CandidateDevice(
                name=device.name,
                address=device.address,
                port=device.port,
                from_registry=True,
            )
            for device in self._registry.by_recency()
        ]
        seen = {(c.address, c.port): c for c in candidates}

        result = await self._adb.devices()
        if result.succeeded:
            for address, port in parse_devices_output(result.output):
                if (address, port) in seen:
                    seen[(address, port)].is_connected = True
                    continue
                live = CandidateDevice(
                    name=LIVE_DEVICE_NAME,
                    address=address,
                    port=port,
                    is_connected=True,
                )
                seen[(address, port)] = live
                candidates.append(live)
        else:
            logger.warning(f"⚠ Scan error: {result.output}")

        self._candidates = candidates
        if candidates:
            logger.info(f"Found {len(candidates)} device(s)")
        else:
            logger.info("No devices found")
        return list(candidates)
