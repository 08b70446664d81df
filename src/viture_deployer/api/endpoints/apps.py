"""Installed app endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from viture_deployer.api.deps import get_context, raise_for_result, require_serial
from viture_deployer.api.schemas.operation import AppListResponse, OperationResponse
from viture_deployer.services.context import DeployerContext

router = APIRouter(prefix="/apps")


def _app_list(context: DeployerContext, serial: str, show_all: bool) -> dict:
    apps = context.inventory.apply_filter(show_all)
    return {
        "serial": serial,
        "show_all": show_all,
        "total": len(context.inventory.apps),
        "apps": [a.to_dict() for a in apps],
    }


@router.get("", response_model=AppListResponse, summary="List cached apps")
async def list_apps(
    show_all: Optional[bool] = None,
    context: DeployerContext = Depends(get_context),
) -> dict:
    serial = require_serial(context)
    if show_all is None:
        show_all = context.settings.show_all_apps
    return _app_list(context, serial, show_all)


@router.post("/refresh", response_model=AppListResponse, summary="Fetch installed apps from the device")
async def refresh_apps(
    show_all: Optional[bool] = None,
    context: DeployerContext = Depends(get_context),
) -> dict:
    serial = require_serial(context)
    result = await context.inventory.refresh(serial)
    if not result.succeeded:
        raise HTTPException(status_code=502, detail=result.message)

    if show_all is None:
        show_all = context.settings.show_all_apps
    return _app_list(context, serial, show_all)


@router.delete("/{package_id}", response_model=OperationResponse, summary="Uninstall an app")
async def uninstall_app(package_id: str, context: DeployerContext = Depends(get_context)) -> dict:
    serial = require_serial(context)
    record = context.inventory.find(package_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"App {package_id} not found")

    result = await context.inventory.uninstall_selected(serial, record)
    return raise_for_result(result).to_dict()
