"""API schemas for persisted settings."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SettingsUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    pair_address: str | None = None
    pair_port: int | None = Field(default=None, ge=1, le=65535)
    connect_address: str | None = None
    connect_port: int | None = Field(default=None, ge=1, le=65535)
    last_artifact_path: str | None = None
    show_all_apps: bool | None = None
    auto_deploy_after_build: bool | None = None


class AutoDeployResponse(BaseModel):
    auto_deploy_after_build: bool
