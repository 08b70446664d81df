"""Explicitly constructed workflow context.

設定 (SettingsStore) と各ワークフローを 1 つにまとめる。シングルトンにはせず、
サービス起動時・CLI 実行時にそれぞれ生成し、終了時に close() で保存する。
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from viture_deployer.core.config import Config
from viture_deployer.models.result import AdbResult
from viture_deployer.models.settings import DeployerSettings
from viture_deployer.services.adb import AdbClient, CommandRunner
from viture_deployer.services.app_inventory import AppInventory
from viture_deployer.services.connection import ConnectionWorkflow
from viture_deployer.services.deploy import DeployWorkflow
from viture_deployer.services.device_registry import DeviceRegistry
from viture_deployer.services.discovery import Discovery
from viture_deployer.services.settings_store import SettingsStore

logger = logging.getLogger(__name__)


class Runner(Protocol):
    async def run(self, *args: str) -> AdbResult: ...


class DeployerContext:
    def __init__(self, config: Config, store: SettingsStore, runner: Optional[Runner] = None):
        self.config = config
        self.store = store

        self.adb = AdbClient(runner or CommandRunner(config.adb_path))
        self.registry = DeviceRegistry(store)
        self.discovery = Discovery(self.adb, self.registry)
        self.connection = ConnectionWorkflow(self.adb, store, self.registry, self.discovery)
        self.deploy = DeployWorkflow(
            self.adb,
            store,
            self.registry,
            self.connection,
            resolve_application_id=lambda: config.application_id,
            target_platform=config.target_platform,
        )
        self.inventory = AppInventory(self.adb, self.deploy)

        self.connection.on_disconnected(self.inventory.clear)

    @classmethod
    def create(cls, config: Config, runner: Optional[Runner] = None) -> "DeployerContext":
        store = SettingsStore.open(config.settings_path)
        logger.debug(f"Loaded settings from {config.settings_path}")
        return cls(config, store, runner=runner)

    @property
    def settings(self) -> DeployerSettings:
        return self.store.settings

    def close(self) -> None:
        self.store.save()
