"""Device discovery endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from viture_deployer.api.deps import get_context
from viture_deployer.api.schemas.device import AdbVersionResponse, Device
from viture_deployer.models.settings import SavedDevice
from viture_deployer.services.adb import check_adb
from viture_deployer.services.context import DeployerContext

router = APIRouter()


@router.get("/adb/version", response_model=AdbVersionResponse, summary="Check the adb binary")
async def adb_version(context: DeployerContext = Depends(get_context)) -> AdbVersionResponse:
    version = await check_adb(context.adb)
    return AdbVersionResponse(available=version is not None, version=version)


@router.get("/devices", response_model=list[Device], summary="Scan for devices")
async def list_devices(context: DeployerContext = Depends(get_context)) -> list[dict]:
    candidates = await context.discovery.scan()
    return [c.to_dict() for c in candidates]


@router.get(
    "/devices/saved",
    response_model=list[SavedDevice],
    response_model_by_alias=False,
    summary="List saved devices",
)
async def list_saved_devices(context: DeployerContext = Depends(get_context)) -> list[SavedDevice]:
    return context.registry.by_recency()


@router.delete("/devices/{address}", status_code=204, summary="Forget a saved device")
async def forget_device(address: str, context: DeployerContext = Depends(get_context)) -> None:
    if context.registry.remove(address) == 0:
        raise HTTPException(status_code=404, detail=f"Device {address} not found")
