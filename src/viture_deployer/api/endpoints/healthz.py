"""Health check endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from viture_deployer import __version__
from viture_deployer.api.deps import get_context
from viture_deployer.api.schemas.device import HealthzResponse
from viture_deployer.services.context import DeployerContext

router = APIRouter()


@router.get("/healthz", response_model=HealthzResponse, summary="Deployer status")
@router.get("/api/healthz", include_in_schema=False)
async def healthz(context: DeployerContext = Depends(get_context)) -> HealthzResponse:
    """503 until the lifespan has loaded settings."""
    return HealthzResponse(
        status="ok",
        version=__version__,
        connection=context.connection.state.value,
        auto_deploy=context.settings.auto_deploy_after_build,
        saved_devices=len(context.registry),
    )
