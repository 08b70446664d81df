"""API schemas for deploy / app operations."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class OperationResponse(BaseModel):
    succeeded: bool
    message: str = Field(description="Raw adb output or a short notice")


class InstallRequest(BaseModel):
    artifact_path: str | None = Field(default=None, description="APK path; defaults to the last built APK")
    serial: str | None = Field(default=None, description="Defaults to the active connection")
    allow_downgrade: bool = True
    grant_permissions: bool = True


class PackageRequest(BaseModel):
    package_id: str = Field(min_length=1)
    serial: str | None = None


class BuildCompleteRequest(BaseModel):
    """Build-completion event sent by an external build pipeline."""

    platform: str = Field(description="Build target platform, e.g. android")
    succeeded: bool
    output_path: str = Field(description="Path of the built APK")
    application_id: str | None = Field(default=None, description="Package id to launch after install")


class App(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    package_id: str = Field(alias="packageId")
    display_name: str = Field(alias="displayName")
    is_relevant: bool = Field(alias="isRelevant", description="Looks like a Unity / XR app")


class AppListResponse(BaseModel):
    serial: str
    show_all: bool
    total: int = Field(description="Number of third-party apps on the device")
    apps: list[App]


class LogResponse(BaseModel):
    messages: list[str]
