"""Launcher-specific exceptions and resolution notices.

Every failure the updater can hit is mapped onto one of three kinds before
it leaves the resolver: fatal (nothing to run), degraded (a stale binary is
used) or ignorable (logged only).
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class IssueKind(Enum):
    """Severity of a problem met during resolution."""
    FATAL = "fatal"
    DEGRADED = "degraded"
    IGNORABLE = "ignorable"


@dataclass(frozen=True)
class ResolutionNotice:
    """A non-fatal problem recorded on a successful resolution."""
    kind: IssueKind
    message: str
    path: Optional[Path] = None
    cause: Optional[BaseException] = None

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class LauncherError(Exception):
    """Base exception for all launcher errors."""

    kind = IssueKind.FATAL

    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class BinaryUnavailableError(LauncherError):
    """No language server binary could be resolved; nothing can be launched."""

    def __init__(self, expected_path: Path, cause: Exception = None, reason: str = None):
        self.expected_path = Path(expected_path)
        self.cause = cause
        self.reason = reason
        message = f"Language server binary not available at '{self.expected_path}'"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, cause)


class DownloadError(LauncherError):
    """Downloading a release asset to disk failed."""

    kind = IssueKind.DEGRADED

    def __init__(self, asset_name: str, target_path: Path, original_error: Exception = None):
        self.asset_name = asset_name
        self.target_path = Path(target_path)
        message = f"Failed to download '{asset_name}' to '{self.target_path}'"
        super().__init__(message, original_error)


class VersionMarkerError(LauncherError):
    """The installed version marker could not be written."""

    def __init__(self, marker_path: Path, original_error: Exception = None):
        self.marker_path = Path(marker_path)
        message = f"Failed to record installed version in '{self.marker_path}'"
        super().__init__(message, original_error)
