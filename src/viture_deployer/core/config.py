"""Runtime configuration for the deployer service and CLI.

設定は環境変数から読む。依存を増やさないため pydantic-settings は使わない。
API / CLI から編集する値（接続先アドレス等）は models.settings 側で永続化する。
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Optional

DOCUMENTATION_URL = "https://github.com/tonyvent/VitureDeploy-Unity"
PLATFORM_TOOLS_URL = "https://developer.android.com/tools/releases/platform-tools"


@dataclass(frozen=True)
class Config:
    """プロセス単位の設定"""

    adb_path: str
    settings_path: Path
    application_id: Optional[str]
    target_platform: str
    android_sdk_root: Optional[str]
    cors_allow_origins: list[str]
    log_level: str


def default_settings_path() -> Path:
    """Per-user location of settings.json."""

    local_app_data = os.environ.get("LOCALAPPDATA")
    if local_app_data:
        base = Path(local_app_data)
    else:
        xdg = os.environ.get("XDG_DATA_HOME")
        base = Path(xdg) if xdg else Path.home() / ".local" / "share"
    return base / "VitureDeployer" / "settings.json"


def load_config() -> Config:
    """環境変数から Config を生成する。"""

    settings_env = os.environ.get("VITURE_DEPLOYER_SETTINGS")
    settings_path = Path(settings_env).expanduser() if settings_env else default_settings_path()

    application_id = os.environ.get("VITURE_APPLICATION_ID", "").strip() or None

    # Unity の EditorPrefs は無いので SDK の場所は環境変数のみで解決する
    android_sdk_root = os.environ.get("ANDROID_HOME") or os.environ.get("ANDROID_SDK_ROOT") or None

    cors = os.environ.get("CORS_ALLOW_ORIGINS", "*")
    cors_allow_origins = [o.strip() for o in cors.split(",") if o.strip()]

    return Config(
        adb_path=os.environ.get("ADB_PATH", "adb"),
        settings_path=settings_path,
        application_id=application_id,
        target_platform=os.environ.get("VITURE_TARGET_PLATFORM", "android").strip().lower(),
        android_sdk_root=android_sdk_root,
        cors_allow_origins=cors_allow_origins,
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    )


def find_android_sdk(config: Config) -> Optional[Path]:
    """Return the configured Android SDK directory if it exists."""

    if not config.android_sdk_root:
        return None
    path = Path(config.android_sdk_root).expanduser()
    if path.is_dir():
        return path
    return None
