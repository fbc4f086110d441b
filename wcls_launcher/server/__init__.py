"""Host-facing surface: launch command, configuration payloads, session."""

from .command import ResolvedCommand, build_command, resolve_node_binary
from .options import inject_tsdk
from .session import LanguageServerSession

__all__ = [
    "ResolvedCommand",
    "build_command",
    "resolve_node_binary",
    "inject_tsdk",
    "LanguageServerSession",
]
