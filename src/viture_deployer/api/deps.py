"""Shared helpers for endpoint modules."""

from __future__ import annotations

from fastapi import HTTPException, Request

from viture_deployer.models.result import OperationResult
from viture_deployer.services.context import DeployerContext


def get_context(request: Request) -> DeployerContext:
    context = getattr(request.app.state, "context", None)
    if context is None:
        raise HTTPException(status_code=503, detail="Deployer is not initialized")
    return context


def require_serial(context: DeployerContext, serial: str | None = None) -> str:
    """Explicit serial, or the active connection's serial."""
    serial = serial or context.connection.serial
    if not serial:
        raise HTTPException(status_code=409, detail="Not connected")
    return serial


def raise_for_result(result: OperationResult) -> OperationResult:
    """失敗した操作を HTTP エラーに変換する（前提条件違反は 409、adb の拒否は 502）"""
    if not result.succeeded:
        status_code = 409 if result.precondition else 502
        raise HTTPException(status_code=status_code, detail=result.message)
    return result
