"""GitHub Releases feed for language server binaries.

Fetches the latest published release of a repository and downloads its
assets.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional

import requests

logger = logging.getLogger("wcls_launcher.github_client")


# GitHub API constants
GITHUB_API_BASE = "https://api.github.com"
DEFAULT_REPOSITORY = "wc-toolkit/wc-language-server"
USER_AGENT = "wc-language-server-launcher/1.0"

# How many releases to scan when prereleases are allowed
RELEASE_PAGE_SIZE = 20

DOWNLOAD_CHUNK_SIZE = 8192


class ReleaseFeedError(Exception):
    """Base exception for release feed errors."""
    pass


class FeedConnectionError(ReleaseFeedError):
    """Raised when unable to connect to GitHub."""
    pass


class FeedRateLimitError(ReleaseFeedError):
    """Raised when GitHub rate limit is exceeded."""
    pass


class FeedNotFoundError(ReleaseFeedError):
    """Raised when repository or release is not found."""
    pass


class FeedNoAssetsError(ReleaseFeedError):
    """Raised when assets are required but the release has none."""
    pass


@dataclass(frozen=True)
class ReleaseAsset:
    """Represents a downloadable asset from a GitHub release."""
    name: str
    download_url: str
    size: int = 0
    content_type: str = ""

    @classmethod
    def from_api_response(cls, data: dict) -> "ReleaseAsset":
        """Create ReleaseAsset from GitHub API response."""
        return cls(
            name=data.get("name", ""),
            download_url=data.get("browser_download_url", ""),
            size=data.get("size", 0),
            content_type=data.get("content_type", ""),
        )


@dataclass(frozen=True)
class ReleaseDescriptor:
    """One published release: its tag and downloadable assets."""
    tag_name: str
    assets: List[ReleaseAsset] = field(default_factory=list)
    name: str = ""
    published_at: Optional[datetime] = None
    html_url: str = ""
    prerelease: bool = False
    draft: bool = False

    @property
    def version(self) -> str:
        """Get version string from tag name."""
        return self.tag_name

    @property
    def has_assets(self) -> bool:
        return len(self.assets) > 0

    def get_asset(self, name: str) -> Optional[ReleaseAsset]:
        """Get asset by name."""
        for asset in self.assets:
            if asset.name == name:
                return asset
        return None

    @classmethod
    def from_api_response(cls, data: dict) -> "ReleaseDescriptor":
        """Create ReleaseDescriptor from GitHub API response."""
        published_at = None
        if data.get("published_at"):
            try:
                published_at = datetime.fromisoformat(
                    data["published_at"].replace("Z", "+00:00")
                )
            except (ValueError, TypeError):
                pass

        assets = [
            ReleaseAsset.from_api_response(a)
            for a in data.get("assets") or []
        ]

        return cls(
            tag_name=data.get("tag_name", ""),
            assets=assets,
            name=data.get("name") or "",
            published_at=published_at,
            html_url=data.get("html_url", ""),
            prerelease=data.get("prerelease", False),
            draft=data.get("draft", False),
        )


class GitHubReleaseFeed:
    """Release feed backed by the GitHub REST API."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        token: Optional[str] = None,
        api_base: str = GITHUB_API_BASE,
    ):
        """
        Initialize the feed.

        Args:
            timeout: Request timeout in seconds (None waits indefinitely)
            token: Optional GitHub token for authenticated requests
            api_base: API root URL
        """
        self._timeout = timeout
        self._api_base = api_base.rstrip("/")
        self._session = requests.Session()
        self._session.headers.update({
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": USER_AGENT,
        })
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"

    def _releases_url(self, repository: str) -> str:
        return f"{self._api_base}/repos/{repository}/releases"

    def _make_request(self, url: str):
        """
        Make a GET request to GitHub API.

        Raises:
            FeedConnectionError: If unable to connect
            FeedRateLimitError: If rate limit exceeded
            FeedNotFoundError: If resource not found
            ReleaseFeedError: For other errors
        """
        try:
            logger.debug(f"Making request to: {url}")
            response = self._session.get(url, timeout=self._timeout)
        except requests.exceptions.Timeout:
            logger.error("GitHub request timed out")
            raise FeedConnectionError("Request timed out connecting to GitHub")
        except requests.exceptions.ConnectionError as e:
            logger.error(f"GitHub connection error: {e}")
            raise FeedConnectionError(
                "Unable to connect to GitHub. Check your internet connection."
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"GitHub request error: {e}")
            raise ReleaseFeedError(f"Request failed: {e}")

        if response.status_code == 200:
            try:
                return response.json()
            except ValueError as e:
                raise ReleaseFeedError(f"Invalid JSON from GitHub: {e}")
        elif response.status_code == 404:
            raise FeedNotFoundError(f"Resource not found: {url}")
        elif response.status_code in (403, 429):
            if response.status_code == 429 or "rate limit" in response.text.lower():
                raise FeedRateLimitError("GitHub API rate limit exceeded")
            raise ReleaseFeedError(f"Access denied: {response.text}")
        raise ReleaseFeedError(
            f"GitHub API error {response.status_code}: {response.text}"
        )

    def latest_release(
        self,
        repository: str = DEFAULT_REPOSITORY,
        require_assets: bool = True,
        allow_prerelease: bool = False,
    ) -> ReleaseDescriptor:
        """
        Get the latest release of a repository.

        Args:
            repository: "owner/name" repository identifier
            require_assets: Fail if the release has no downloadable assets
            allow_prerelease: Consider prereleases as candidates

        Returns:
            ReleaseDescriptor for the latest matching release

        Raises:
            FeedNotFoundError: If no matching release exists
            FeedNoAssetsError: If assets are required and missing
            ReleaseFeedError: For other errors
        """
        logger.info(f"Fetching latest release of {repository}")

        if allow_prerelease:
            release = self._latest_including_prereleases(repository)
        else:
            data = self._make_request(f"{self._releases_url(repository)}/latest")
            release = ReleaseDescriptor.from_api_response(data)

        if require_assets and not release.has_assets:
            raise FeedNoAssetsError(
                f"Latest release {release.tag_name} of {repository} has no assets"
            )

        logger.info(f"Found latest release: {release.tag_name}")
        return release

    def _latest_including_prereleases(self, repository: str) -> ReleaseDescriptor:
        data = self._make_request(
            f"{self._releases_url(repository)}?per_page={RELEASE_PAGE_SIZE}"
        )
        if isinstance(data, list):
            for entry in data:
                if not entry.get("draft", False):
                    return ReleaseDescriptor.from_api_response(entry)
        raise FeedNotFoundError(f"No published releases found for {repository}")

    def download_asset(
        self,
        asset: ReleaseAsset,
        callback: Optional[Callable[[int, int], None]] = None
    ) -> bytes:
        """
        Download a release asset.

        Args:
            asset: ReleaseAsset to download
            callback: Optional progress callback(bytes_downloaded, total_bytes)

        Returns:
            Downloaded file content as bytes

        Raises:
            FeedConnectionError: If unable to connect
            ReleaseFeedError: For other errors
        """
        try:
            logger.info(f"Downloading asset: {asset.name} ({asset.size} bytes)")

            response = self._session.get(
                asset.download_url,
                stream=True,
                timeout=self._timeout
            )
            response.raise_for_status()

            total_size = int(response.headers.get("content-length", asset.size))
            chunks = []
            downloaded = 0

            for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                if chunk:
                    chunks.append(chunk)
                    downloaded += len(chunk)
                    if callback:
                        callback(downloaded, total_size)

            content = b"".join(chunks)
            logger.info(f"Downloaded {len(content)} bytes for {asset.name}")
            return content

        except requests.exceptions.Timeout:
            raise FeedConnectionError("Download timed out")
        except requests.exceptions.ConnectionError as e:
            raise FeedConnectionError(f"Download failed: {e}")
        except requests.exceptions.RequestException as e:
            raise ReleaseFeedError(f"Download failed: {e}")

    def close(self) -> None:
        """Close the HTTP session."""
        self._session.close()

    def __enter__(self) -> "GitHubReleaseFeed":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
