from .app import AppRecord
from .device import CandidateDevice, ConnectionState
from .result import AdbResult, OperationResult
from .settings import DeployerSettings, SavedDevice

__all__ = [
    "AdbResult",
    "AppRecord",
    "CandidateDevice",
    "ConnectionState",
    "DeployerSettings",
    "OperationResult",
    "SavedDevice",
]
