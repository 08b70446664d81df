"""Device domain models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

DEFAULT_ADB_PORT = 5555


class ConnectionState(str, Enum):
    """ワイヤレス ADB 接続の状態"""

    DISCONNECTED = "disconnected"
    PAIRING = "pairing"
    CONNECTING = "connecting"
    CONNECTED = "connected"


@dataclass
class CandidateDevice:
    """スキャンで見つかった接続候補

    レジストリ由来 (from_registry) と `adb devices` 由来 (is_connected) がある。
    永続化はせず、スキャンのたびに作り直す。
    """

    name: str
    address: str
    port: int = DEFAULT_ADB_PORT
    from_registry: bool = False
    is_connected: bool = False

    @property
    def serial(self) -> str:
        return f"{self.address}:{self.port}"

    @property
    def display_name(self) -> str:
        if self.from_registry:
            return f"{self.name} (saved)"
        return self.name

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "displayName": self.display_name,
            "address": self.address,
            "port": self.port,
            "serial": self.serial,
            "fromRegistry": self.from_registry,
            "isConnected": self.is_connected,
        }


def parse_serial(serial: str, default_port: int = DEFAULT_ADB_PORT) -> Optional[tuple[str, int]]:
    """Split an `address:port` serial. Returns None when the port is not a number."""

    serial = serial.strip()
    if not serial:
        return None
    if ":" not in serial:
        return serial, default_port

    address, _, port_str = serial.rpartition(":")
    if not address:
        return None
    try:
        port = int(port_str)
    except ValueError:
        return None
    if not 0 < port < 65536:
        return None
    return address, port
