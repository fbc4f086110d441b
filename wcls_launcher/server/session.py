"""Language server session wiring.

A session owns the binary resolver, the toolchain locator and the settings
for one server lifetime. Host integrations create one session and ask it
for the launch command and the configuration payloads.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from wcls_launcher.config.credentials import TokenStore
from wcls_launcher.config.paths import InstallLayout, get_install_dir
from wcls_launcher.config.settings import LauncherSettings
from wcls_launcher.server.command import ResolvedCommand, build_command
from wcls_launcher.server.options import inject_tsdk
from wcls_launcher.toolchain.locator import ToolchainLocator
from wcls_launcher.updater.github_client import GitHubReleaseFeed
from wcls_launcher.updater.installer import ProgressCallback
from wcls_launcher.updater.release import ResolvedBinary
from wcls_launcher.updater.resolver import BinaryResolver

logger = logging.getLogger("wcls_launcher.session")


class LanguageServerSession:
    """Resolution state for one language server session."""

    def __init__(
        self,
        settings: LauncherSettings,
        workspace_root: Optional[Path] = None,
        feed=None,
        token_store: Optional[TokenStore] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        """
        Initialize the session.

        Args:
            settings: Effective settings (environment overrides applied)
            workspace_root: Root of the workspace the server serves
            feed: Release feed (default: GitHub, authenticated if a token
                is configured)
            token_store: Source of the GitHub token
            progress_callback: Optional callback for download progress
        """
        self._settings = settings
        self._workspace_root = Path(workspace_root) if workspace_root else None

        install_root = Path(settings.install_dir) if settings.install_dir else get_install_dir()
        self._layout = InstallLayout(install_root)

        if feed is None:
            token = (token_store or TokenStore()).get_token()
            feed = GitHubReleaseFeed(timeout=settings.request_timeout, token=token)
        self._feed = feed

        self._resolver = BinaryResolver(
            feed,
            self._layout,
            repository=settings.repository,
            override_path=Path(settings.server_path) if settings.server_path else None,
            allow_prerelease=settings.allow_prerelease,
            auto_check_updates=settings.auto_check_updates,
            progress_callback=progress_callback,
        )
        self._locator = ToolchainLocator(
            bundle_root=install_root,
            override=settings.tsdk or None,
            search_paths=settings.tsdk_search_paths,
        )

    @property
    def settings(self) -> LauncherSettings:
        return self._settings

    @property
    def layout(self) -> InstallLayout:
        return self._layout

    @property
    def resolver(self) -> BinaryResolver:
        return self._resolver

    @property
    def locator(self) -> ToolchainLocator:
        return self._locator

    def resolve_binary(self) -> ResolvedBinary:
        """Resolve the binary, raising BinaryUnavailableError if there is none."""
        return self._resolver.resolve()

    def resolve_command(self) -> ResolvedCommand:
        """Resolve the command line that starts the language server."""
        return build_command(self.resolve_binary(), node_path=self._settings.node_path)

    def tsdk(self) -> str:
        return self._locator.locate(self._workspace_root)

    def initialization_options(self, payload: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Initialization options with the TypeScript SDK filled in."""
        return inject_tsdk(payload, self.tsdk)

    def workspace_settings(self, payload: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Workspace settings with the TypeScript SDK filled in."""
        return inject_tsdk(payload, self.tsdk)

    def close(self) -> None:
        """Release network resources."""
        close = getattr(self._feed, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "LanguageServerSession":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
