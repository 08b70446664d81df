from __future__ import annotations

import asyncio
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from viture_deployer.api.endpoints import healthz
from viture_deployer.api.router import api_router
from viture_deployer.core.config import Config
from viture_deployer.models.result import AdbResult
from viture_deployer.services.context import DeployerContext
from viture_deployer.services.settings_store import SettingsStore


def _command_key(args: tuple[str, ...]) -> str:
    """("-s", serial, "shell", "pm", ...) -> "pm", ("connect", ...) -> "connect" """
    rest = list(args)
    if rest[:1] == ["-s"]:
        rest = rest[2:]
    if rest[:1] == ["shell"]:
        rest = rest[1:]
    return rest[0] if rest else ""


class FakeCommandRunner:
    """Scripted stand-in for the adb CommandRunner.

    Responses are keyed by subcommand (`connect`, `install`, `pm`, `monkey`...).
    Unscripted commands succeed with empty output.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, ...]] = []
        self._responses: dict[str, list[AdbResult]] = {}
        self._gates: dict[str, asyncio.Event] = {}

    def respond(self, command: str, succeeded: bool, output: str = "") -> None:
        self._responses.setdefault(command, []).append(AdbResult(succeeded, output))

    def hold(self, command: str) -> asyncio.Event:
        """`command` blocks until the returned event is set."""
        gate = asyncio.Event()
        self._gates[command] = gate
        return gate

    @property
    def commands(self) -> list[str]:
        return [_command_key(c) for c in self.calls]

    def calls_for(self, command: str) -> list[tuple[str, ...]]:
        return [c for c in self.calls if _command_key(c) == command]

    async def run(self, *args: str) -> AdbResult:
        self.calls.append(args)
        key = _command_key(args)
        if key in self._gates:
            await self._gates[key].wait()
        queue = self._responses.get(key)
        if not queue:
            return AdbResult(True, "")
        # the last scripted response sticks
        return queue.pop(0) if len(queue) > 1 else queue[0]


@pytest.fixture
def settings_path(tmp_path: Path) -> Path:
    return tmp_path / "VitureDeployer" / "settings.json"


@pytest.fixture
def config(settings_path: Path) -> Config:
    return Config(
        adb_path="adb",
        settings_path=settings_path,
        application_id="com.defaultcompany.MyGameTitle",
        target_platform="android",
        android_sdk_root=None,
        cors_allow_origins=["*"],
        log_level="INFO",
    )


@pytest.fixture
def runner() -> FakeCommandRunner:
    return FakeCommandRunner()


@pytest.fixture
def store(settings_path: Path) -> SettingsStore:
    return SettingsStore.open(settings_path)


@pytest.fixture
def context(config: Config, store: SettingsStore, runner: FakeCommandRunner) -> DeployerContext:
    return DeployerContext(config, store, runner=runner)


@pytest.fixture
def app(context: DeployerContext) -> FastAPI:
    # Build an app without the production lifespan (no adb binary).
    app = FastAPI()
    app.include_router(healthz.router, tags=["health"])
    app.include_router(api_router)
    app.state.context = context
    return app


@pytest.fixture
def client(app: FastAPI):
    with TestClient(app) as c:
        yield c
