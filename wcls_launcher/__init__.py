"""Launcher for the Web Components language server.

Resolves which language server executable to run, keeps it up to date
from GitHub releases, and locates the TypeScript SDK it needs.
"""

__version__ = "1.0.0"
