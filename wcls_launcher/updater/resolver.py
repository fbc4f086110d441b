"""Language server binary resolution and self-update.

Decides which executable to launch: an operator override, the installed
binary when it is current, or a freshly downloaded release asset. When the
release feed or the download fails, a previously installed binary is used
instead. With nothing installed, a wc-language-server executable on PATH
is the last resort before resolution fails.
"""

import logging
import shutil
from pathlib import Path
from typing import Optional, Tuple

from wcls_launcher.config.paths import InstallLayout
from wcls_launcher.updater.exceptions import (
    BinaryUnavailableError,
    IssueKind,
    LauncherError,
    ResolutionNotice,
)
from wcls_launcher.updater.github_client import (
    DEFAULT_REPOSITORY,
    ReleaseAsset,
    ReleaseDescriptor,
    ReleaseFeedError,
)
from wcls_launcher.updater.installer import Installer, ProgressCallback
from wcls_launcher.updater.platform import (
    UNIVERSAL_SELECTION,
    AssetSelection,
    select_current_asset,
)
from wcls_launcher.updater.release import BinarySource, ResolvedBinary
from wcls_launcher.utils.chain import ResolutionChain, StepResult

logger = logging.getLogger("wcls_launcher.resolver")

# Executable name looked up on PATH when no managed install is usable
SYSTEM_BINARY_NAME = "wc-language-server"


class BinaryResolver:
    """
    Resolves the language server binary for one server session.

    Holds no state between calls apart from what is on disk: every call to
    resolve() queries the feed once (unless update checks are disabled and
    a binary is installed).
    """

    def __init__(
        self,
        feed,
        layout: InstallLayout,
        repository: str = DEFAULT_REPOSITORY,
        override_path: Optional[Path] = None,
        allow_prerelease: bool = False,
        auto_check_updates: bool = True,
        platform_id: Optional[Tuple[str, str]] = None,
        installer: Optional[Installer] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        """
        Initialize the resolver.

        Args:
            feed: Release feed (latest_release / download_asset)
            layout: Install directory layout
            repository: "owner/name" of the release repository
            override_path: Operator-supplied binary, used verbatim
            allow_prerelease: Consider prereleases when checking for updates
            auto_check_updates: Query the feed even when a binary is installed
            platform_id: Explicit (OS, arch) pair, default is this host
            installer: Installer to use (default: one built from feed/layout)
            progress_callback: Optional callback for download progress
        """
        self._feed = feed
        self._layout = layout
        self._repository = repository
        self._override_path = Path(override_path) if override_path else None
        self._allow_prerelease = allow_prerelease
        self._auto_check_updates = auto_check_updates
        self._platform_id = platform_id
        self._installer = installer or Installer(feed, layout)
        self._progress_callback = progress_callback
        self._unavailable: Optional[BinaryUnavailableError] = None

    @property
    def layout(self) -> InstallLayout:
        return self._layout

    @property
    def installer(self) -> Installer:
        return self._installer

    def resolve(self) -> ResolvedBinary:
        """
        Resolve the binary to launch.

        Returns:
            ResolvedBinary with path and execution mode

        Raises:
            BinaryUnavailableError: If there is nothing to run
        """
        self._unavailable = None
        chain = ResolutionChain("language server", [
            ("override", self._from_override),
            ("managed install", self._from_managed_install),
            ("PATH", self._from_system_path),
        ])
        result = chain.run()
        if result.error is not None:
            raise result.error
        resolved = result.value
        for notice in resolved.notices:
            if notice.kind == IssueKind.DEGRADED:
                logger.warning(str(notice))
        logger.info(
            f"Resolved language server {resolved.display_version} at {resolved.path}"
        )
        return resolved

    def _from_override(self) -> StepResult:
        if self._override_path is None:
            return StepResult.skip("no override configured")
        if not self._override_path.exists():
            return StepResult.fail(BinaryUnavailableError(
                self._override_path,
                reason="override path does not exist",
            ))
        logger.info(f"Using language server override: {self._override_path}")
        return StepResult.accept(ResolvedBinary(
            path=self._override_path,
            requires_runtime=False,
            source=BinarySource.OVERRIDE,
        ))

    def _from_managed_install(self) -> StepResult:
        selection = select_current_asset(self._platform_id)
        existing = self._existing_binary(selection)
        installed_version = self._installer.installed_version()

        if existing is not None and not self._auto_check_updates:
            logger.debug("Update checks disabled, using installed binary")
            return StepResult.accept(self._existing_result(
                existing, installed_version, BinarySource.CACHED
            ))

        try:
            release = self._feed.latest_release(
                self._repository,
                require_assets=True,
                allow_prerelease=self._allow_prerelease,
            )
        except ReleaseFeedError as e:
            return self._fall_back(
                existing, selection, installed_version,
                "Could not check for language server updates", e,
            )

        if existing is not None and installed_version == release.tag_name:
            logger.debug(f"Installed language server {installed_version} is current")
            return StepResult.accept(self._existing_result(
                existing, installed_version, BinarySource.CACHED
            ))

        match = self._match_asset(release, selection)
        if match is None:
            return self._fall_back(
                existing, selection, installed_version,
                f"Release {release.tag_name} has no '{selection.asset_name}' "
                f"or '{UNIVERSAL_SELECTION.asset_name}' asset",
            )
        asset, asset_selection = match

        target_path = self._layout.binary_path(asset.name)
        try:
            installed = self._installer.install(
                release, asset, target_path, self._progress_callback
            )
        except LauncherError as e:
            return self._fall_back(
                existing, selection, installed_version,
                f"Failed to install language server {release.tag_name}", e,
            )

        return StepResult.accept(ResolvedBinary(
            path=installed.path,
            requires_runtime=asset_selection.requires_runtime,
            source=BinarySource.INSTALLED,
            version=installed.version,
            notices=list(installed.notices),
        ))

    def _existing_binary(self, selection: AssetSelection) -> Optional[Tuple[Path, bool]]:
        """Installed binary for this platform: native first, then universal."""
        candidates = [selection]
        if not selection.is_universal:
            candidates.append(UNIVERSAL_SELECTION)
        for candidate in candidates:
            path = self._layout.binary_path(candidate.asset_name)
            if path.is_file():
                return path, candidate.requires_runtime
        return None

    @staticmethod
    def _existing_result(
        existing: Tuple[Path, bool],
        version: Optional[str],
        source: BinarySource,
    ) -> ResolvedBinary:
        path, requires_runtime = existing
        return ResolvedBinary(
            path=path,
            requires_runtime=requires_runtime,
            source=source,
            version=version,
        )

    @staticmethod
    def _match_asset(
        release: ReleaseDescriptor,
        selection: AssetSelection,
    ) -> Optional[Tuple[ReleaseAsset, AssetSelection]]:
        """Pick the platform asset, else the universal one, from a release."""
        asset = release.get_asset(selection.asset_name)
        if asset is not None:
            return asset, selection
        if not selection.is_universal:
            asset = release.get_asset(UNIVERSAL_SELECTION.asset_name)
            if asset is not None:
                logger.info(
                    f"Release {release.tag_name} has no {selection.asset_name}, "
                    f"using {UNIVERSAL_SELECTION.asset_name}"
                )
                return asset, UNIVERSAL_SELECTION
        return None

    def _fall_back(
        self,
        existing: Optional[Tuple[Path, bool]],
        selection: AssetSelection,
        installed_version: Optional[str],
        message: str,
        cause: Optional[Exception] = None,
    ) -> StepResult:
        """Use the installed binary if there is one, otherwise defer to PATH."""
        if existing is None:
            expected_path = self._layout.binary_path(selection.asset_name)
            self._unavailable = BinaryUnavailableError(
                expected_path, cause=cause, reason=message
            )
            return StepResult.skip(f"{message}; nothing installed at {expected_path}")

        resolved = self._existing_result(existing, installed_version, BinarySource.STALE)
        resolved.notices.append(ResolutionNotice(
            IssueKind.DEGRADED,
            f"{message}; using installed language server at {resolved.path}",
            path=resolved.path,
            cause=cause,
        ))
        return StepResult.accept(resolved)

    def _from_system_path(self) -> StepResult:
        """Last resort: a wc-language-server executable on PATH."""
        error = self._unavailable
        if error is None:
            return StepResult.skip("managed install did not run")

        found = shutil.which(SYSTEM_BINARY_NAME)
        if found is None:
            logger.error(f"{error.reason}; no installed language server at {error.expected_path}")
            return StepResult.fail(error)

        path = Path(found)
        return StepResult.accept(ResolvedBinary(
            path=path,
            requires_runtime=False,
            source=BinarySource.SYSTEM,
            notices=[ResolutionNotice(
                IssueKind.DEGRADED,
                f"{error.reason}; using {SYSTEM_BINARY_NAME} from PATH at {path}",
                path=path,
                cause=error.cause,
            )],
        ))
