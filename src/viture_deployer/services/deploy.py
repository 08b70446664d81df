"""APK のインストール・アンインストール・起動と、ビルド後の自動デプロイ

install / uninstall は exit status 0 かつ出力に "Success" を含む場合のみ成功。
launch / stop は exit status だけで判定する（adb が成功を示す文言を出さないため）。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from viture_deployer.models.result import OperationResult
from viture_deployer.services.adb import AdbClient
from viture_deployer.services.connection import ConnectionWorkflow
from viture_deployer.services.device_registry import DeviceRegistry
from viture_deployer.services.settings_store import SettingsStore

logger = logging.getLogger(__name__)

SUCCESS_PHRASE = "Success"

ApplicationIdResolver = Callable[[], Optional[str]]


@dataclass(frozen=True)
class BuildReport:
    """外部ビルドパイプラインからのビルド完了通知"""

    platform: str
    succeeded: bool
    output_path: str
    application_id: Optional[str] = None


class DeployWorkflow:
    def __init__(
        self,
        adb: AdbClient,
        store: SettingsStore,
        registry: DeviceRegistry,
        connection: ConnectionWorkflow,
        resolve_application_id: ApplicationIdResolver,
        target_platform: str = "android",
    ):
        self._adb = adb
        self._store = store
        self._registry = registry
        self._connection = connection
        self._resolve_application_id = resolve_application_id
        self.target_platform = target_platform.lower()

    async def install(
        self,
        serial: str,
        artifact_path: str,
        allow_downgrade: bool = True,
        grant_permissions: bool = True,
    ) -> OperationResult:
        if not artifact_path:
            logger.info("Install skipped: no APK selected")
            return OperationResult.skipped("No APK selected")

        logger.info(f"Installing {Path(artifact_path).name}...")
        logger.info("This may take a minute...")
        result = await self._adb.install(
            serial,
            artifact_path,
            allow_downgrade=allow_downgrade,
            grant_permissions=grant_permissions,
        )

        if result.succeeded and result.contains(SUCCESS_PHRASE):
            logger.info("✓ APK installed successfully!")
            return OperationResult.ok(result.output)

        logger.error(f"✗ Installation failed: {result.output}")
        return OperationResult.failed(result.output)

    async def uninstall(self, serial: str, package_id: str) -> OperationResult:
        logger.info(f"Uninstalling {package_id}...")
        result = await self._adb.uninstall(serial, package_id)

        if result.succeeded and result.contains(SUCCESS_PHRASE):
            logger.info(f"✓ {package_id} uninstalled successfully!")
            return OperationResult.ok(result.output)

        logger.error(f"✗ Uninstall failed: {result.output}")
        return OperationResult.failed(result.output)

    async def launch_app(self, serial: str, package_id: str) -> OperationResult:
        result = await self._adb.launch_app(serial, package_id)
        if result.succeeded:
            logger.info(f"✓ Launched {package_id}")
            return OperationResult.ok(result.output)

        logger.error(f"✗ Failed to launch {package_id}: {result.output}")
        return OperationResult.failed(result.output)

    async def stop_app(self, serial: str, package_id: str) -> OperationResult:
        result = await self._adb.stop_app(serial, package_id)
        if result.succeeded:
            logger.info(f"✓ Stopped {package_id}")
            return OperationResult.ok(result.output)

        logger.error(f"✗ Failed to stop {package_id}: {result.output}")
        return OperationResult.failed(result.output)

    async def auto_deploy_on_build_complete(
        self,
        build_output_path: str,
        build_succeeded: bool,
        build_platform_is_target: bool,
        application_id: Optional[str] = None,
    ) -> OperationResult:
        """ビルド完了時の自動デプロイ (connect -> install -> launch)

        どの段階で失敗してもログに出して終了する。例外はビルド側へ伝えない。
        """
        if not build_platform_is_target:
            return OperationResult.skipped("Build platform is not the deploy target")
        if not build_succeeded:
            return OperationResult.skipped("Build did not succeed")

        settings = self._store.settings
        if not settings.auto_deploy_after_build:
            return OperationResult.skipped("Auto-deploy is disabled")

        device = self._registry.most_recent()
        if device is None:
            logger.info(
                "Auto-deploy skipped: No saved devices. Connect a device first."
            )
            return OperationResult.skipped("No saved devices")

        logger.info(f"Build completed: {build_output_path}")
        settings.last_artifact_path = build_output_path
        self._store.save()

        logger.info(f"Auto-deploying to {device.name} ({device.serial})...")
        connected = await self._connection.connect(device.address, device.port, name=device.name)
        if not connected.succeeded:
            logger.warning(f"Could not connect to {device.serial}: {connected.message}")
            return connected

        installed = await self.install(device.serial, build_output_path)
        if not installed.succeeded:
            return installed
        logger.info(f"✓ APK deployed successfully to {device.name}!")

        package_id = application_id or self._resolve_application_id()
        if not package_id:
            logger.info("No application id configured; skipping launch")
            return installed

        return await self.launch_app(device.serial, package_id)

    async def on_build_complete(self, report: BuildReport) -> OperationResult:
        """Build pipeline adapter. Never raises."""
        try:
            return await self.auto_deploy_on_build_complete(
                report.output_path,
                report.succeeded,
                report.platform.strip().lower() == self.target_platform,
                application_id=report.application_id,
            )
        except Exception as e:
            logger.exception(f"Auto-deploy failed: {e}")
            return OperationResult.failed(f"Auto-deploy failed: {e}")

    async def quick_deploy(self) -> OperationResult:
        """最後にビルドした APK を最後に接続したデバイスへインストールする"""
        artifact_path = self._store.settings.last_artifact_path
        if not artifact_path or not Path(artifact_path).is_file():
            logger.info("Quick deploy skipped: no APK found")
            return OperationResult.skipped(
                "No APK found. Build your project first or select an APK."
            )

        device = self._registry.most_recent()
        if device is None:
            logger.info("Quick deploy skipped: no saved devices")
            return OperationResult.skipped(
                "No saved devices found. Connect to a device first."
            )

        connected = await self._connection.connect(device.address, device.port, name=device.name)
        if not connected.succeeded:
            return OperationResult.failed(f"Could not connect to {device.serial}:\n{connected.message}")

        return await self.install(device.serial, artifact_path)

    def toggle_auto_deploy(self) -> bool:
        settings = self._store.settings
        settings.auto_deploy_after_build = not settings.auto_deploy_after_build
        self._store.save()

        status = "enabled" if settings.auto_deploy_after_build else "disabled"
        logger.info(f"Auto-deploy after build: {status}")
        return settings.auto_deploy_after_build
