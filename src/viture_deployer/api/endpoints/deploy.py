"""Install / launch / stop endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from viture_deployer.api.deps import get_context, raise_for_result, require_serial
from viture_deployer.api.schemas.operation import InstallRequest, OperationResponse, PackageRequest
from viture_deployer.services.context import DeployerContext

router = APIRouter(prefix="/deploy")


@router.post("/install", response_model=OperationResponse, summary="Install an APK")
async def install(body: InstallRequest, context: DeployerContext = Depends(get_context)) -> dict:
    serial = require_serial(context, body.serial)
    artifact_path = body.artifact_path or context.settings.last_artifact_path

    result = await context.deploy.install(
        serial,
        artifact_path,
        allow_downgrade=body.allow_downgrade,
        grant_permissions=body.grant_permissions,
    )
    if result.succeeded and artifact_path != context.settings.last_artifact_path:
        context.settings.last_artifact_path = artifact_path
        context.store.save()
    return raise_for_result(result).to_dict()


@router.post("/quick", response_model=OperationResponse, summary="Install the last APK on the last device")
async def quick_deploy(context: DeployerContext = Depends(get_context)) -> dict:
    result = await context.deploy.quick_deploy()
    return raise_for_result(result).to_dict()


@router.post("/launch", response_model=OperationResponse, summary="Launch an app")
async def launch(body: PackageRequest, context: DeployerContext = Depends(get_context)) -> dict:
    serial = require_serial(context, body.serial)
    result = await context.deploy.launch_app(serial, body.package_id)
    return raise_for_result(result).to_dict()


@router.post("/stop", response_model=OperationResponse, summary="Force-stop an app")
async def stop(body: PackageRequest, context: DeployerContext = Depends(get_context)) -> dict:
    serial = require_serial(context, body.serial)
    result = await context.deploy.stop_app(serial, body.package_id)
    return raise_for_result(result).to_dict()
