"""Persisted deployer settings (settings.json).

The file is shared with the VitureDeployer Unity editor plugin, so the
aliases below are its key names and ports are written as strings.
`model_dump(by_alias=True)` produces that file layout; the API uses the
field names.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, SerializationInfo, field_serializer, field_validator

from viture_deployer.models.device import DEFAULT_ADB_PORT

# "2026-01-01T10:00:00.1234567Z" (.NET round-trip format) -> 6 digit fraction, +00:00
_FRACTION = re.compile(r"(\.\d{6})\d+")


def parse_timestamp(value: str) -> datetime:
    """ISO-8601 を naive なローカル時刻に変換する。解析できなければ datetime.min"""
    if not value:
        return datetime.min
    text = _FRACTION.sub(r"\1", value.strip())
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone().replace(tzinfo=None)
    except (ValueError, OverflowError, OSError):
        return datetime.min
    return parsed


def _port_text(port: Optional[int], info: SerializationInfo) -> Union[int, str, None]:
    if not info.by_alias:
        return port
    return "" if port is None else str(port)


class SavedDevice(BaseModel):
    """一度接続に成功したデバイス（address ごとに 1 件）"""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str = Field(default="Device", alias="Name")
    address: str = Field(alias="Ip")
    port: int = Field(default=DEFAULT_ADB_PORT, alias="Port")
    last_connected: str = Field(default="", alias="LastConnected", description="ISO-8601 timestamp")

    @field_validator("port", mode="before")
    @classmethod
    def _blank_port(cls, value: Any) -> Any:
        return DEFAULT_ADB_PORT if value in ("", None) else value

    @field_validator("last_connected", mode="before")
    @classmethod
    def _null_timestamp(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_serializer("port")
    def _serialize_port(self, port: int, info: SerializationInfo) -> Union[int, str, None]:
        return _port_text(port, info)

    @property
    def serial(self) -> str:
        return f"{self.address}:{self.port}"

    @property
    def last_connected_at(self) -> datetime:
        """Parsed timestamp; datetime.min when absent or unparsable."""
        return parse_timestamp(self.last_connected)


class DeployerSettings(BaseModel):
    """settings.json の内容"""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, validate_assignment=True)

    pair_address: str = Field(default="192.168.", alias="PairIp")
    pair_port: Optional[int] = Field(default=None, alias="PairPort")
    connect_address: str = Field(default="192.168.", alias="ConnectIp")
    connect_port: int = Field(default=DEFAULT_ADB_PORT, alias="ConnectPort")
    last_artifact_path: str = Field(default="", alias="LastApkPath")
    show_all_apps: bool = Field(default=False, alias="ShowAllApps")
    auto_deploy_after_build: bool = Field(default=False, alias="AutoDeployAfterBuild")
    devices: list[SavedDevice] = Field(default_factory=list, alias="SavedDevices")

    @field_validator("pair_port", mode="before")
    @classmethod
    def _blank_pair_port(cls, value: Any) -> Any:
        return None if value == "" else value

    @field_validator("connect_port", mode="before")
    @classmethod
    def _blank_connect_port(cls, value: Any) -> Any:
        return DEFAULT_ADB_PORT if value in ("", None) else value

    @field_serializer("pair_port", "connect_port")
    def _serialize_port(self, port: Optional[int], info: SerializationInfo) -> Union[int, str, None]:
        return _port_text(port, info)
