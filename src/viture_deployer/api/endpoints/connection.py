"""Pair / connect / disconnect endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from viture_deployer.api.deps import get_context, raise_for_result
from viture_deployer.api.schemas.device import (
    ConnectionStatus,
    ConnectRequest,
    DisconnectRequest,
    PairRequest,
)
from viture_deployer.api.schemas.operation import OperationResponse
from viture_deployer.services.context import DeployerContext

router = APIRouter(prefix="/connection")


@router.get("", response_model=ConnectionStatus, summary="Current connection")
async def connection_status(context: DeployerContext = Depends(get_context)) -> dict:
    return context.connection.to_dict()


@router.post("/pair", response_model=OperationResponse, summary="Pair with a device")
async def pair(body: PairRequest, context: DeployerContext = Depends(get_context)) -> dict:
    result = await context.connection.pair(body.address, body.port, body.code)
    return raise_for_result(result).to_dict()


@router.post("/connect", response_model=OperationResponse, summary="Connect over wireless ADB")
async def connect(body: ConnectRequest, context: DeployerContext = Depends(get_context)) -> dict:
    result = await context.connection.connect(body.address, body.port, name=body.name)
    return raise_for_result(result).to_dict()


@router.post("/disconnect", response_model=OperationResponse, summary="Disconnect")
async def disconnect(
    body: DisconnectRequest | None = None,
    context: DeployerContext = Depends(get_context),
) -> dict:
    serial = body.serial if body else None
    result = await context.connection.disconnect(serial)
    return raise_for_result(result).to_dict()
