"""viture-deployer コマンドライン

各サブコマンドは DeployerContext を 1 回だけ生成し、終了時に設定を保存する。
終了コードは成功 0 / 失敗 1。
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import sys
import webbrowser
from pathlib import Path
from typing import Optional

from viture_deployer.core.config import DOCUMENTATION_URL, Config, find_android_sdk, load_config
from viture_deployer.core.logging import configure_logging
from viture_deployer.models.device import DEFAULT_ADB_PORT
from viture_deployer.models.result import OperationResult
from viture_deployer.services.adb import check_adb
from viture_deployer.services.context import DeployerContext
from viture_deployer.services.deploy import BuildReport


def create_context(config: Config) -> DeployerContext:
    return DeployerContext.create(config)


def _report(result: OperationResult) -> int:
    mark = "✓" if result.succeeded else "✗"
    print(f"{mark} {result.message}" if result.message else mark)
    return 0 if result.succeeded else 1


def _resolve_serial(context: DeployerContext, serial: Optional[str]) -> Optional[str]:
    """--serial があればそれ、無ければ最後に接続したデバイス"""
    if serial:
        return serial
    device = context.registry.most_recent()
    if device is None:
        print("✗ No device given and no saved devices. Use --serial or connect first.")
        return None
    return device.serial


async def cmd_version(context: DeployerContext, args: argparse.Namespace) -> int:
    version = await check_adb(context.adb)
    if version is None:
        print("✗ ADB not found")
        return 1
    print(version)
    return 0


async def cmd_devices(context: DeployerContext, args: argparse.Namespace) -> int:
    candidates = await context.discovery.scan()
    if args.json:
        print(json.dumps([c.to_dict() for c in candidates], indent=2))
        return 0

    if not candidates:
        print("No devices found")
    for c in candidates:
        flags = []
        if c.from_registry:
            flags.append("saved")
        if c.is_connected:
            flags.append("connected")
        print(f"{c.serial}\t{c.name}\t{','.join(flags)}")
    return 0


async def cmd_pair(context: DeployerContext, args: argparse.Namespace) -> int:
    return _report(await context.connection.pair(args.address, args.port, args.code))


async def cmd_connect(context: DeployerContext, args: argparse.Namespace) -> int:
    return _report(await context.connection.connect(args.address, args.port, name=args.name))


async def cmd_disconnect(context: DeployerContext, args: argparse.Namespace) -> int:
    return _report(await context.connection.disconnect(args.serial))


async def cmd_forget(context: DeployerContext, args: argparse.Namespace) -> int:
    if context.registry.remove(args.address) == 0:
        print(f"✗ Device {args.address} not found")
        return 1
    print(f"✓ Removed {args.address}")
    return 0


async def cmd_install(context: DeployerContext, args: argparse.Namespace) -> int:
    serial = _resolve_serial(context, args.serial)
    if serial is None:
        return 1

    artifact_path = args.apk or context.settings.last_artifact_path
    result = await context.deploy.install(
        serial,
        artifact_path,
        allow_downgrade=not args.no_downgrade,
        grant_permissions=not args.no_grant,
    )
    if result.succeeded:
        context.settings.last_artifact_path = artifact_path
    return _report(result)


async def cmd_uninstall(context: DeployerContext, args: argparse.Namespace) -> int:
    serial = _resolve_serial(context, args.serial)
    if serial is None:
        return 1
    return _report(await context.deploy.uninstall(serial, args.package_id))


async def cmd_launch(context: DeployerContext, args: argparse.Namespace) -> int:
    serial = _resolve_serial(context, args.serial)
    if serial is None:
        return 1
    return _report(await context.deploy.launch_app(serial, args.package_id))


async def cmd_stop(context: DeployerContext, args: argparse.Namespace) -> int:
    serial = _resolve_serial(context, args.serial)
    if serial is None:
        return 1
    return _report(await context.deploy.stop_app(serial, args.package_id))


async def cmd_apps(context: DeployerContext, args: argparse.Namespace) -> int:
    serial = _resolve_serial(context, args.serial)
    if serial is None:
        return 1

    result = await context.inventory.refresh(serial)
    if not result.succeeded:
        print(f"✗ {result.message}")
        return 1

    show_all = args.all or context.settings.show_all_apps
    for app in context.inventory.apply_filter(show_all):
        print(f"{app.package_id}\t{app.display_name}")
    return 0


async def cmd_quick_deploy(context: DeployerContext, args: argparse.Namespace) -> int:
    return _report(await context.deploy.quick_deploy())


async def cmd_build_complete(context: DeployerContext, args: argparse.Namespace) -> int:
    report = BuildReport(
        platform=args.platform,
        succeeded=not args.failed,
        output_path=args.output_path,
        application_id=args.application_id,
    )
    result = await context.deploy.on_build_complete(report)
    _report(result)
    # ビルドを失敗させないため常に 0
    return 0


async def cmd_toggle_auto_deploy(context: DeployerContext, args: argparse.Namespace) -> int:
    enabled = context.deploy.toggle_auto_deploy()
    print(f"Auto-deploy after build: {'enabled' if enabled else 'disabled'}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="viture-deployer",
        description="Wireless ADB pairing, connection and APK deployment",
    )
    parser.add_argument(
        "--settings",
        help="settings.json のパス (default: $VITURE_DEPLOYER_SETTINGS またはユーザーデータ領域)",
    )
    parser.add_argument("--adb", help="adb バイナリのパス (default: $ADB_PATH または adb)")
    parser.add_argument("-v", "--verbose", action="store_true", help="DEBUG ログを出力")

    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="HTTP API サーバーを起動")
    serve.add_argument("--host", default="127.0.0.1", help="(default: 127.0.0.1)")
    serve.add_argument("--port", type=int, default=8000, help="(default: 8000)")

    sub.add_parser("version", help="adb の有無とバージョンを確認").set_defaults(handler=cmd_version)

    devices = sub.add_parser("devices", help="保存済みデバイスと接続中デバイスを一覧")
    devices.add_argument("--json", action="store_true", help="JSON で出力")
    devices.set_defaults(handler=cmd_devices)

    pair = sub.add_parser("pair", help="ペアリングコードでペアリング")
    pair.add_argument("address")
    pair.add_argument("port", type=int)
    pair.add_argument("code")
    pair.set_defaults(handler=cmd_pair)

    connect = sub.add_parser("connect", help="ワイヤレス ADB で接続")
    connect.add_argument("address")
    connect.add_argument("port", type=int, nargs="?", default=DEFAULT_ADB_PORT)
    connect.add_argument("--name", default="Device", help="保存時のデバイス名")
    connect.set_defaults(handler=cmd_connect)

    disconnect = sub.add_parser("disconnect", help="切断")
    disconnect.add_argument("serial", help="address:port")
    disconnect.set_defaults(handler=cmd_disconnect)

    forget = sub.add_parser("forget", help="保存済みデバイスを削除")
    forget.add_argument("address")
    forget.set_defaults(handler=cmd_forget)

    install = sub.add_parser("install", help="APK をインストール")
    install.add_argument("apk", nargs="?", help="APK のパス (default: 最後にビルドした APK)")
    install.add_argument("--serial", help="default: 最後に接続したデバイス")
    install.add_argument("--no-downgrade", action="store_true", help="-d を付けない")
    install.add_argument("--no-grant", action="store_true", help="-g を付けない")
    install.set_defaults(handler=cmd_install)

    for name, handler, help_text in (
        ("uninstall", cmd_uninstall, "アプリをアンインストール"),
        ("launch", cmd_launch, "アプリを起動"),
        ("stop", cmd_stop, "アプリを強制停止"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("package_id")
        p.add_argument("--serial", help="default: 最後に接続したデバイス")
        p.set_defaults(handler=handler)

    apps = sub.add_parser("apps", help="インストール済みアプリを一覧")
    apps.add_argument("--serial", help="default: 最後に接続したデバイス")
    apps.add_argument("--all", action="store_true", help="Unity / XR 以外のアプリも表示")
    apps.set_defaults(handler=cmd_apps)

    sub.add_parser(
        "quick-deploy", help="最後の APK を最後に接続したデバイスへインストール"
    ).set_defaults(handler=cmd_quick_deploy)

    build = sub.add_parser("build-complete", help="ビルド完了を通知（自動デプロイ）")
    build.add_argument("output_path", help="ビルドした APK のパス")
    build.add_argument("--platform", default="android", help="(default: android)")
    build.add_argument("--failed", action="store_true", help="ビルド失敗として通知")
    build.add_argument("--application-id", help="起動するパッケージ名 (default: $VITURE_APPLICATION_ID)")
    build.set_defaults(handler=cmd_build_complete)

    sub.add_parser(
        "toggle-auto-deploy", help="ビルド後の自動デプロイを切り替え"
    ).set_defaults(handler=cmd_toggle_auto_deploy)

    sub.add_parser("sdk-location", help="Android SDK のパスを表示")
    sub.add_parser("docs", help="ドキュメントをブラウザで開く")

    return parser


async def _run(config: Config, args: argparse.Namespace) -> int:
    context = create_context(config)
    try:
        return await args.handler(context, args)
    finally:
        context.close()


def _serve(config: Config, host: str, port: int) -> int:
    import uvicorn

    from viture_deployer.main import create_app

    uvicorn.run(create_app(config), host=host, port=port)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config()
    if args.settings:
        config = dataclasses.replace(config, settings_path=Path(args.settings).expanduser())
    if args.adb:
        config = dataclasses.replace(config, adb_path=args.adb)
    configure_logging("DEBUG" if args.verbose else config.log_level)

    if args.command == "serve":
        return _serve(config, args.host, args.port)

    if args.command == "docs":
        webbrowser.open(DOCUMENTATION_URL)
        print(DOCUMENTATION_URL)
        return 0

    if args.command == "sdk-location":
        sdk = find_android_sdk(config)
        if sdk is None:
            print("✗ Android SDK location not found. Set ANDROID_HOME or ANDROID_SDK_ROOT.")
            return 1
        print(sdk)
        return 0

    return asyncio.run(_run(config, args))


if __name__ == "__main__":
    sys.exit(main())
