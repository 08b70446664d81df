"""Top-level API router (prefixed under /api)."""

from __future__ import annotations

from fastapi import APIRouter

from viture_deployer.api.endpoints import apps, connection, deploy, devices, hooks, settings

api_router = APIRouter(prefix="/api")

api_router.include_router(devices.router, tags=["devices"])
api_router.include_router(connection.router, tags=["connection"])
api_router.include_router(deploy.router, tags=["deploy"])
api_router.include_router(apps.router, tags=["apps"])
api_router.include_router(hooks.router, tags=["hooks"])
api_router.include_router(settings.router, tags=["settings"])
