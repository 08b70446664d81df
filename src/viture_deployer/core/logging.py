"""Logging setup and the in-memory activity log."""

from __future__ import annotations

import logging
from collections import deque
from datetime import datetime
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
ACTIVITY_LOG_SIZE = 100


class ActivityLog(logging.Handler):
    """直近の操作ログを保持するハンドラ

    デプロイ操作の結果をクライアントへ返すため、`viture_deployer` ロガーに
    流れたメッセージを `[HH:MM:SS] message` 形式で最大 100 件まで保持する。
    """

    def __init__(self, maxlen: int = ACTIVITY_LOG_SIZE):
        super().__init__(level=logging.INFO)
        self._messages: deque[str] = deque(maxlen=maxlen)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            stamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
            self._messages.append(f"[{stamp}] {record.getMessage()}")
        except Exception:
            self.handleError(record)

    def messages(self) -> list[str]:
        return list(self._messages)

    def clear(self) -> None:
        self._messages.clear()


_activity_log: Optional[ActivityLog] = None


def get_activity_log() -> ActivityLog:
    """ActivityLog を取得（初回に `viture_deployer` ロガーへ登録する）"""
    global _activity_log
    if _activity_log is None:
        _activity_log = ActivityLog()
        package_logger = logging.getLogger("viture_deployer")
        if package_logger.level == logging.NOTSET:
            package_logger.setLevel(logging.INFO)
        package_logger.addHandler(_activity_log)
    return _activity_log


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
    get_activity_log()
    logging.getLogger("viture_deployer").setLevel(level)
