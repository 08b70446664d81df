"""Build pipeline hook endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from viture_deployer.api.deps import get_context
from viture_deployer.api.schemas.operation import BuildCompleteRequest, OperationResponse
from viture_deployer.services.context import DeployerContext
from viture_deployer.services.deploy import BuildReport

router = APIRouter(prefix="/hooks")


@router.post(
    "/build-complete",
    response_model=OperationResponse,
    summary="Auto-deploy after a build",
    description=(
        "Always answers 200 so that a failed deploy never fails the build.\n\n"
        "Auto-deploy runs only when the build succeeded for the target platform, "
        "auto-deploy is enabled and at least one device was connected before."
    ),
)
async def build_complete(body: BuildCompleteRequest, context: DeployerContext = Depends(get_context)) -> dict:
    report = BuildReport(
        platform=body.platform,
        succeeded=body.succeeded,
        output_path=body.output_path,
        application_id=body.application_id,
    )
    result = await context.deploy.on_build_complete(report)
    return result.to_dict()
