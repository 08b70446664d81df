"""Command and operation results."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AdbResult:
    """adb コマンドの実行結果（exit status 0 なら succeeded）"""

    succeeded: bool
    output: str

    def contains(self, phrase: str) -> bool:
        """Case-insensitive substring match on the combined output."""
        return phrase.lower() in self.output.lower()


@dataclass(frozen=True)
class OperationResult:
    """ワークフロー操作の結果

    失敗時の message には adb の出力をそのまま入れる。
    precondition は前提条件を満たさず adb を呼ばなかった場合に True。
    """

    succeeded: bool
    message: str
    precondition: bool = False

    @classmethod
    def ok(cls, message: str = "") -> "OperationResult":
        return cls(True, message)

    @classmethod
    def failed(cls, message: str) -> "OperationResult":
        return cls(False, message)

    @classmethod
    def skipped(cls, message: str) -> "OperationResult":
        return cls(False, message, precondition=True)

    def to_dict(self) -> dict:
        return {"succeeded": self.succeeded, "message": self.message}
