"""Pytest configuration and shared fixtures for launcher tests."""

import pytest
from pathlib import Path
from typing import Generator
from unittest.mock import MagicMock

from wcls_launcher.config.paths import InstallLayout
from wcls_launcher.toolchain.locator import TSDK_MARKER
from wcls_launcher.updater.github_client import ReleaseAsset, ReleaseDescriptor


# Test constants
TEST_VERSION = "2.3.0"
LINUX_X64 = ("linux", "x86_64")
LINUX_ASSET = "wc-language-server-linux-x64"
UNIVERSAL_ASSET = "wc-language-server.js"


def make_release(version: str = TEST_VERSION, *asset_names: str) -> ReleaseDescriptor:
    """Build a release with assets served from example.com."""
    return ReleaseDescriptor(
        tag_name=version,
        assets=[
            ReleaseAsset(name=name, download_url=f"https://example.com/{version}/{name}")
            for name in asset_names
        ],
    )


@pytest.fixture
def layout(tmp_path: Path) -> InstallLayout:
    """Provide an empty install layout under a temp directory."""
    return InstallLayout(tmp_path / "server")


@pytest.fixture
def mock_feed() -> MagicMock:
    """Provide a release feed returning 2.3.0 with a linux-x64 asset."""
    feed = MagicMock()
    feed.latest_release.return_value = make_release(TEST_VERSION, LINUX_ASSET, UNIVERSAL_ASSET)
    feed.download_asset.return_value = b"\x7fELF downloaded"
    return feed


@pytest.fixture
def installed_binary(layout: InstallLayout) -> Path:
    """Create an installed linux-x64 binary recorded as 2.3.0."""
    binary = layout.binary_path(LINUX_ASSET)
    binary.parent.mkdir(parents=True)
    binary.write_bytes(b"\x7fELF installed")
    layout.marker_path.write_text(TEST_VERSION)
    return binary


@pytest.fixture
def temp_settings_file(tmp_path: Path) -> Generator[Path, None, None]:
    """Provide a temporary settings file path for testing."""
    settings_file = tmp_path / "settings.json"
    yield settings_file


def make_tsdk(root: Path) -> Path:
    """Create a node_modules/typescript/lib directory with its marker file."""
    lib = root / "node_modules" / "typescript" / "lib"
    lib.mkdir(parents=True)
    (lib / TSDK_MARKER).write_text("// tsserverlibrary")
    return lib
