"""API schemas for device discovery and connection endpoints."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ConnectionState(str, Enum):
    """Connection state as exposed via API."""

    disconnected = "disconnected"
    pairing = "pairing"
    connecting = "connecting"
    connected = "connected"


class Device(BaseModel):
    """Candidate device returned by a discovery scan."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(description="Device label")
    display_name: str = Field(alias="displayName", description="Label shown in device lists")
    address: str = Field(description="Host address")
    port: int = Field(description="ADB port")
    serial: str = Field(description="address:port")
    from_registry: bool = Field(alias="fromRegistry", description="Previously connected device")
    is_connected: bool = Field(alias="isConnected", description="Currently reported by adb devices")


class ConnectionStatus(BaseModel):
    state: ConnectionState
    serial: str | None = None


class PairRequest(BaseModel):
    address: str = Field(description="Pairing host shown on the device")
    port: int = Field(ge=1, le=65535, description="Pairing port (differs from the connect port)")
    code: str = Field(min_length=1, description="Six digit pairing code")


class ConnectRequest(BaseModel):
    address: str
    port: int = Field(default=5555, ge=1, le=65535)
    name: str = Field(default="Device", description="Label stored in the device registry")


class DisconnectRequest(BaseModel):
    serial: str | None = Field(default=None, description="Defaults to the active connection")


class HealthzResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str
    version: str
    connection: ConnectionState = Field(description="Current connection state")
    auto_deploy: bool = Field(alias="autoDeploy", description="Deploy after each successful build")
    saved_devices: int = Field(alias="savedDevices", description="Devices in the registry")


class AdbVersionResponse(BaseModel):
    available: bool
    version: str | None = None
