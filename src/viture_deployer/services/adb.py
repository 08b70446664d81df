"""adb コマンドランナー

外部の adb バイナリをサブプロセスで起動し、stdout/stderr をまとめて返す。
asyncio のサブプロセスを使うのでイベントループはブロックしない。
タイムアウト・リトライ・キャンセルはこの層では扱わない。
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from viture_deployer.core.config import PLATFORM_TOOLS_URL
from viture_deployer.models.result import AdbResult

logger = logging.getLogger(__name__)


class CommandRunner:
    """adb を実行して AdbResult を返す。例外は投げない。"""

    def __init__(self, adb_path: str = "adb"):
        self.adb_path = adb_path

    async def run(self, *args: str) -> AdbResult:
        cmd = [self.adb_path, *args]
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            stdout, stderr = await proc.communicate()
        except Exception as e:
            logger.debug(f"Failed to start {self.adb_path}: {e}")
            return AdbResult(False, f"Error: {e}")

        output = stdout.decode("utf-8", errors="replace")
        error = stderr.decode("utf-8", errors="replace")
        combined = f"{output}\n{error}" if error else output

        return AdbResult(proc.returncode == 0, combined.strip())


class AdbClient:
    """adb サブコマンドの組み立て"""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    async def version(self) -> AdbResult:
        return await self.runner.run("version")

    async def devices(self) -> AdbResult:
        return await self.runner.run("devices")

    async def pair(self, address: str, port: int, code: str) -> AdbResult:
        return await self.runner.run("pair", f"{address}:{port}", code)

    async def connect(self, address: str, port: int) -> AdbResult:
        return await self.runner.run("connect", f"{address}:{port}")

    async def disconnect(self, serial: str) -> AdbResult:
        return await self.runner.run("disconnect", serial)

    async def install(
        self,
        serial: str,
        apk_path: str,
        allow_downgrade: bool = True,
        grant_permissions: bool = True,
    ) -> AdbResult:
        flags = ["-r"]
        if allow_downgrade:
            flags.append("-d")
        if grant_permissions:
            flags.append("-g")
        return await self.runner.run("-s", serial, "install", *flags, apk_path)

    async def uninstall(self, serial: str, package_id: str) -> AdbResult:
        return await self.runner.run("-s", serial, "uninstall", package_id)

    async def list_packages(self, serial: str, third_party_only: bool = True) -> AdbResult:
        args = ["-s", serial, "shell", "pm", "list", "packages"]
        if third_party_only:
            args.append("-3")
        return await self.runner.run(*args)

    async def launch_app(self, serial: str, package_id: str) -> AdbResult:
        return await self.runner.run(
            "-s", serial, "shell",
            "monkey", "-p", package_id,
            "-c", "android.intent.category.LAUNCHER", "1",
        )

    async def stop_app(self, serial: str, package_id: str) -> AdbResult:
        return await self.runner.run("-s", serial, "shell", "am", "force-stop", package_id)


async def check_adb(adb: AdbClient) -> Optional[str]:
    """adb version の 1 行目を返す。adb が使えなければ None。"""
    result = await adb.version()
    if result.succeeded:
        version = result.output.splitlines()[0] if result.output else ""
        logger.info(f"✓ ADB found: {version}")
        return version

    logger.warning("⚠ ADB not found in PATH. Please install Android Platform Tools.")
    logger.warning(f"  Download from: {PLATFORM_TOOLS_URL}")
    return None
