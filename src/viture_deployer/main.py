"""Viture Deployer - FastAPI Application

ワイヤレス ADB でのペアリング・接続・APK デプロイを HTTP API として提供する。

- デバイス探索 (/api/devices)
- ペアリング / 接続 / 切断 (/api/connection/*)
- インストール / 起動 / 停止 (/api/deploy/*)
- アプリ一覧とアンインストール (/api/apps)
- ビルド完了フックによる自動デプロイ (/api/hooks/build-complete)

API ドキュメントは `/docs` で確認できる。
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from viture_deployer import __version__
from viture_deployer.api.endpoints import healthz
from viture_deployer.api.router import api_router
from viture_deployer.core.config import Config, load_config
from viture_deployer.core.logging import configure_logging
from viture_deployer.services.adb import check_adb
from viture_deployer.services.context import DeployerContext

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    config: Config = app.state.config

    logger.info("Starting services...")
    logger.info(f"Using settings file: {config.settings_path}")

    context = DeployerContext.create(config)
    app.state.context = context

    await check_adb(context.adb)
    await context.discovery.scan()

    yield

    logger.info("Stopping services...")
    context.close()


def create_app(config: Optional[Config] = None) -> FastAPI:
    config = config or load_config()
    configure_logging(config.log_level)

    app = FastAPI(
        title="Viture Deployer",
        description="Wireless ADB pairing, connection and APK deployment",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        openapi_tags=[
            {"name": "health", "description": "Health check"},
            {"name": "devices", "description": "Device discovery and saved devices"},
            {"name": "connection", "description": "Pairing and wireless connection"},
            {"name": "deploy", "description": "APK install and app launch"},
            {"name": "apps", "description": "Installed third-party apps"},
            {"name": "hooks", "description": "Build pipeline hooks"},
            {"name": "settings", "description": "Persisted settings and activity log"},
        ],
    )
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # root level
    app.include_router(healthz.router, tags=["health"])

    # /api
    app.include_router(api_router)

    return app
