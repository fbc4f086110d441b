"""Resolved language server binary model.

Defines the enum and dataclass describing which binary a resolution
settled on and why.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from wcls_launcher.updater.exceptions import IssueKind, ResolutionNotice


class BinarySource(Enum):
    """Where a resolved binary came from."""
    OVERRIDE = "override"    # Operator-supplied path, never updated
    CACHED = "cached"        # Installed binary already at the latest version
    INSTALLED = "installed"  # Downloaded during this resolution
    STALE = "stale"          # Previously installed binary used after a failure
    SYSTEM = "system"        # Found on PATH after the managed install failed


@dataclass
class ResolvedBinary:
    """The executable (or script) a resolution settled on."""
    path: Path
    requires_runtime: bool
    source: BinarySource
    version: Optional[str] = None
    notices: List[ResolutionNotice] = field(default_factory=list)

    @property
    def is_override(self) -> bool:
        return self.source == BinarySource.OVERRIDE

    @property
    def is_degraded(self) -> bool:
        """True if a stale binary was used because updating failed."""
        return any(n.kind == IssueKind.DEGRADED for n in self.notices)

    @property
    def display_version(self) -> str:
        """Human-readable version string."""
        if self.is_override:
            return "override"
        if self.source == BinarySource.SYSTEM:
            return "system"
        if self.version is None:
            return "unknown"
        if self.source == BinarySource.STALE:
            return f"{self.version} (stale)"
        return self.version
