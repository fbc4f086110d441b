"""Release asset installer.

Downloads a release asset into the install directory, marks it executable
and records the installed version.
"""

import logging
import os
import shutil
import stat
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from wcls_launcher.config.paths import InstallLayout
from wcls_launcher.updater.exceptions import (
    DownloadError,
    IssueKind,
    ResolutionNotice,
)
from wcls_launcher.updater.github_client import (
    ReleaseAsset,
    ReleaseDescriptor,
    ReleaseFeedError,
)
from wcls_launcher.updater.version_store import VersionStore

logger = logging.getLogger("wcls_launcher.installer")

PARTIAL_SUFFIX = ".part"


@dataclass
class DownloadProgress:
    """Progress information for a download operation."""
    asset_name: str
    bytes_downloaded: int
    total_bytes: int

    @property
    def percentage(self) -> float:
        """Download progress as percentage."""
        if self.total_bytes == 0:
            return 0.0
        return (self.bytes_downloaded / self.total_bytes) * 100


# Progress callback type
ProgressCallback = Callable[[DownloadProgress], None]


@dataclass
class InstallResult:
    """Outcome of a successful install."""
    path: Path
    version: str
    notices: List[ResolutionNotice] = field(default_factory=list)


class Installer:
    """Installs release assets into an install layout."""

    def __init__(self, feed, layout: InstallLayout, version_store: Optional[VersionStore] = None):
        """
        Initialize the installer.

        Args:
            feed: Release feed used to download assets
            layout: Install directory layout
            version_store: Version marker store (default: the layout's marker)
        """
        self._feed = feed
        self._layout = layout
        self._version_store = version_store or VersionStore(layout.marker_path)

    @property
    def version_store(self) -> VersionStore:
        return self._version_store

    def install(
        self,
        release: ReleaseDescriptor,
        asset: ReleaseAsset,
        target_path: Path,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> InstallResult:
        """
        Download an asset to target_path and record the release version.

        The download lands in a temporary sibling file first, so a failed
        download leaves any previous binary and the version marker untouched.

        Args:
            release: Release the asset belongs to
            asset: Asset to download
            target_path: Final location of the installed file
            progress_callback: Optional callback for progress updates

        Returns:
            InstallResult for the installed file

        Raises:
            DownloadError: If the download or the file move fails
            VersionMarkerError: If the version cannot be recorded
        """
        target_path = Path(target_path)
        partial_path = target_path.with_name(target_path.name + PARTIAL_SUFFIX)

        try:
            target_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DownloadError(asset.name, target_path, e)

        def report(downloaded: int, total: int) -> None:
            if progress_callback:
                progress_callback(DownloadProgress(
                    asset_name=asset.name,
                    bytes_downloaded=downloaded,
                    total_bytes=total,
                ))

        try:
            content = self._feed.download_asset(asset, callback=report)
            with open(partial_path, "wb") as f:
                f.write(content)
            os.replace(partial_path, target_path)
        except (ReleaseFeedError, OSError) as e:
            logger.error(f"Download of {asset.name} failed: {e}")
            self._discard(partial_path)
            raise DownloadError(asset.name, target_path, e)

        result = InstallResult(path=target_path, version=release.tag_name)
        result.notices.extend(self._remove_other_binaries(target_path))

        notice = self._make_executable(target_path)
        if notice is not None:
            result.notices.append(notice)

        self._version_store.write(release.tag_name)
        logger.info(f"Installed {asset.name} {release.tag_name} to {target_path}")
        return result

    def _make_executable(self, path: Path) -> Optional[ResolutionNotice]:
        """Add execute bits to path. Failure is reported, never raised."""
        try:
            mode = path.stat().st_mode
            path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        except OSError as e:
            logger.warning(f"Could not mark {path} executable: {e}")
            return ResolutionNotice(
                IssueKind.IGNORABLE,
                f"Could not mark '{path}' executable",
                path=path,
                cause=e,
            )
        return None

    def _remove_other_binaries(self, keep: Path) -> List[ResolutionNotice]:
        """Delete every other file in the bin directory.

        The version marker describes a single binary, so a native binary and
        the universal script never stay installed side by side.
        """
        notices = []
        if keep.parent != self._layout.bin_dir:
            return notices
        for path in keep.parent.iterdir():
            if path == keep or not path.is_file():
                continue
            try:
                path.unlink()
                logger.debug(f"Removed superseded binary {path}")
            except OSError as e:
                logger.warning(f"Failed to remove superseded binary {path}: {e}")
                notices.append(ResolutionNotice(
                    IssueKind.IGNORABLE,
                    f"Could not remove superseded binary '{path}'",
                    path=path,
                    cause=e,
                ))
        return notices

    @staticmethod
    def _discard(path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Failed to remove partial download {path}: {e}")

    def installed_version(self) -> Optional[str]:
        """Version recorded by the last successful install."""
        return self._version_store.read()

    def clear(self) -> int:
        """
        Remove installed binaries and the version marker.

        Returns:
            Number of files removed
        """
        count = 0
        bin_dir = self._layout.bin_dir
        if bin_dir.exists():
            count += sum(1 for p in bin_dir.iterdir() if p.is_file())
            shutil.rmtree(bin_dir)
        if self._version_store.clear():
            count += 1
        logger.info(f"Removed {count} installed files from {self._layout.root}")
        return count
