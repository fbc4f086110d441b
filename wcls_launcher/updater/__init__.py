"""Updater module for language server binaries.

This module handles binary resolution and self-update:
- GitHubReleaseFeed: GitHub API integration for release checking
- Installer: Asset download and version marker bookkeeping
- BinaryResolver: Override, cache check, update and fallback
- select_asset: Platform to release asset mapping
"""

from .exceptions import (
    IssueKind,
    ResolutionNotice,
    LauncherError,
    BinaryUnavailableError,
    DownloadError,
    VersionMarkerError,
)
from .github_client import (
    GitHubReleaseFeed,
    ReleaseDescriptor,
    ReleaseAsset,
    ReleaseFeedError,
    FeedConnectionError,
    FeedRateLimitError,
    FeedNotFoundError,
    FeedNoAssetsError,
)
from .installer import (
    Installer,
    InstallResult,
    DownloadProgress,
    ProgressCallback,
)
from .platform import AssetSelection, select_asset, select_current_asset
from .release import BinarySource, ResolvedBinary
from .resolver import BinaryResolver
from .version_store import VersionStore

__all__ = [
    # Errors
    "IssueKind",
    "ResolutionNotice",
    "LauncherError",
    "BinaryUnavailableError",
    "DownloadError",
    "VersionMarkerError",
    # Release feed
    "GitHubReleaseFeed",
    "ReleaseDescriptor",
    "ReleaseAsset",
    "ReleaseFeedError",
    "FeedConnectionError",
    "FeedRateLimitError",
    "FeedNotFoundError",
    "FeedNoAssetsError",
    # Install
    "Installer",
    "InstallResult",
    "DownloadProgress",
    "ProgressCallback",
    "VersionStore",
    # Resolution
    "AssetSelection",
    "select_asset",
    "select_current_asset",
    "BinarySource",
    "ResolvedBinary",
    "BinaryResolver",
]
