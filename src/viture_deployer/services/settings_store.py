"""settings.json の読み書き"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from viture_deployer.models.settings import DeployerSettings

logger = logging.getLogger(__name__)


class SettingsStore:
    """DeployerSettings とその保存先を保持するコンテキスト

    読み込み・保存の失敗はログに出すだけで呼び出し元へは伝えない。
    """

    def __init__(self, path: Path, settings: Optional[DeployerSettings] = None):
        self.path = Path(path)
        self.settings = settings or DeployerSettings()

    @classmethod
    def open(cls, path: Path) -> "SettingsStore":
        store = cls(path)
        store.load()
        return store

    def load(self) -> DeployerSettings:
        self.settings = self._read()
        return self.settings

    def _read(self) -> DeployerSettings:
        try:
            text = self.path.read_text(encoding="utf-8")
            return DeployerSettings.model_validate_json(text)
        except FileNotFoundError:
            return DeployerSettings()
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load settings from {self.path}: {e}")
            return DeployerSettings()

    def save(self) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(self.settings.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning(f"Failed to save settings to {self.path}: {e}")
            return False
        return True
