"""Settings endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from viture_deployer.api.deps import get_context
from viture_deployer.api.schemas.operation import LogResponse
from viture_deployer.api.schemas.settings import AutoDeployResponse, SettingsUpdate
from viture_deployer.core.logging import get_activity_log
from viture_deployer.models.settings import DeployerSettings
from viture_deployer.services.context import DeployerContext

router = APIRouter()


@router.get(
    "/settings",
    response_model=DeployerSettings,
    response_model_by_alias=False,
    summary="Persisted settings",
)
async def get_settings(context: DeployerContext = Depends(get_context)) -> DeployerSettings:
    return context.settings


@router.patch(
    "/settings",
    response_model=DeployerSettings,
    response_model_by_alias=False,
    summary="Update settings",
)
async def update_settings(
    body: SettingsUpdate,
    context: DeployerContext = Depends(get_context),
) -> DeployerSettings:
    settings = context.settings
    for key, value in body.model_dump(exclude_none=True).items():
        setattr(settings, key, value)
    context.store.save()
    return settings


@router.post("/settings/auto-deploy/toggle", response_model=AutoDeployResponse, summary="Toggle auto-deploy")
async def toggle_auto_deploy(context: DeployerContext = Depends(get_context)) -> AutoDeployResponse:
    enabled = context.deploy.toggle_auto_deploy()
    return AutoDeployResponse(auto_deploy_after_build=enabled)


@router.get("/log", response_model=LogResponse, summary="Recent activity log")
async def activity_log() -> LogResponse:
    return LogResponse(messages=get_activity_log().messages())
