"""接続中デバイスのアプリ一覧"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from viture_deployer.models.app import PACKAGE_PREFIX, AppRecord
from viture_deployer.models.result import OperationResult
from viture_deployer.services.adb import AdbClient

if TYPE_CHECKING:
    from viture_deployer.services.deploy import DeployWorkflow

logger = logging.getLogger(__name__)


@dataclass
class AppListResult:
    succeeded: bool
    message: str
    apps: list[AppRecord] = field(default_factory=list)


def parse_package_list(output: str) -> list[str]:
    packages = []
    for line in output.splitlines():
        package_id = line.replace(PACKAGE_PREFIX, "").strip()
        if package_id:
            packages.append(package_id)
    return packages


class AppInventory:
    """`pm list packages -3` の結果を保持し、表示用に絞り込む"""

    def __init__(self, adb: AdbClient, deploy: "DeployWorkflow"):
        self._adb = adb
        self._deploy = deploy
        self._apps: list[AppRecord] = []

    @property
    def apps(self) -> list[AppRecord]:
        return list(self._apps)

    def clear(self) -> None:
        self._apps = []

    async def refresh(self, serial: str) -> AppListResult:
        logger.info("Fetching installed apps...")
        result = await self._adb.list_packages(serial)
        if not result.succeeded:
            logger.error(f"✗ Failed to get app list: {result.output}")
            return AppListResult(False, result.output, self.apps)

        self._apps = [AppRecord.from_package_id(p) for p in parse_package_list(result.output)]
        message = f"Found {len(self._apps)} third-party apps"
        logger.info(f"✓ {message}")
        return AppListResult(True, message, self.apps)

    def apply_filter(self, show_all: bool) -> list[AppRecord]:
        apps = self._apps if show_all else [a for a in self._apps if a.is_relevant]
        return sorted(apps, key=lambda a: a.display_name.casefold())

    def find(self, package_id: str) -> AppRecord | None:
        return next((a for a in self._apps if a.package_id == package_id), None)

    async def uninstall_selected(self, serial: str, record: AppRecord) -> OperationResult:
        result = await self._deploy.uninstall(serial, record.package_id)
        if result.succeeded:
            self._apps = [a for a in self._apps if a.package_id != record.package_id]
        return result
