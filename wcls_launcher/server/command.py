"""Launch command construction for the language server."""

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from wcls_launcher.updater.release import ResolvedBinary


# Protocol transport flag, always the last argument
STDIO_FLAG = "--stdio"

NODE_BINARY = "node"


@dataclass(frozen=True)
class ResolvedCommand:
    """Executable, arguments and environment overrides to launch."""
    command: str
    args: List[str] = field(default_factory=list)
    env: Dict[str, str] = field(default_factory=dict)

    @property
    def argv(self) -> List[str]:
        """Full argument vector, command first."""
        return [self.command, *self.args]

    def to_dict(self) -> dict:
        return {"command": self.command, "args": list(self.args), "env": dict(self.env)}


def resolve_node_binary(node_path: Optional[str] = None) -> str:
    """
    Find the Node.js runtime.

    Args:
        node_path: Operator override, used verbatim when set

    Returns:
        Override, else ``node`` from PATH, else the bare name ``node``
    """
    if node_path:
        return node_path
    return shutil.which(NODE_BINARY) or NODE_BINARY


def build_command(
    binary: ResolvedBinary,
    node_path: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
) -> ResolvedCommand:
    """
    Turn a resolved binary into a launchable command.

    Scripts that need the host runtime are run as ``node <script> --stdio``;
    native executables as ``<binary> --stdio``.
    """
    path = str(Path(binary.path))
    if binary.requires_runtime:
        return ResolvedCommand(
            command=resolve_node_binary(node_path),
            args=[path, STDIO_FLAG],
            env=dict(env or {}),
        )
    return ResolvedCommand(command=path, args=[STDIO_FLAG], env=dict(env or {}))
