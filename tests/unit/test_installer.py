"""Unit tests for VersionStore and Installer."""

import os
import stat
import pytest
from unittest.mock import MagicMock, patch

from wcls_launcher.updater.exceptions import (
    DownloadError,
    IssueKind,
    VersionMarkerError,
)
from wcls_launcher.updater.github_client import FeedConnectionError
from wcls_launcher.updater.installer import DownloadProgress, Installer
from wcls_launcher.updater.version_store import VersionStore

from tests.conftest import LINUX_ASSET, TEST_VERSION, UNIVERSAL_ASSET, make_release


class TestVersionStore:
    """Tests for VersionStore."""

    def test_read_missing_marker(self, tmp_path):
        assert VersionStore(tmp_path / "version.txt").read() is None

    def test_read_trims_whitespace(self, tmp_path):
        marker = tmp_path / "version.txt"
        marker.write_text("  2.3.0\n\n")
        assert VersionStore(marker).read() == "2.3.0"

    def test_read_empty_marker_is_absent(self, tmp_path):
        marker = tmp_path / "version.txt"
        marker.write_text("   \n")
        assert VersionStore(marker).read() is None

    def test_read_unreadable_marker_is_absent(self, tmp_path):
        marker = tmp_path / "version.txt"
        marker.mkdir()
        assert VersionStore(marker).read() is None

    def test_write_then_read(self, tmp_path):
        store = VersionStore(tmp_path / "nested" / "version.txt")
        store.write("2.3.0")
        assert store.marker_path.read_text() == "2.3.0\n"
        assert store.read() == "2.3.0"

    def test_write_failure_raises(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        store = VersionStore(blocker / "version.txt")

        with pytest.raises(VersionMarkerError) as exc_info:
            store.write("2.3.0")
        assert exc_info.value.marker_path == blocker / "version.txt"

    def test_clear(self, tmp_path):
        store = VersionStore(tmp_path / "version.txt")
        assert store.clear() is False
        store.write("1.0.0")
        assert store.clear() is True
        assert store.read() is None


class TestInstaller:
    """Tests for Installer."""

    @pytest.fixture
    def release(self):
        return make_release(TEST_VERSION, LINUX_ASSET)

    @pytest.fixture
    def installer(self, mock_feed, layout):
        return Installer(mock_feed, layout)

    def test_install_writes_binary_and_marker(self, installer, release, layout):
        target = layout.binary_path(LINUX_ASSET)

        result = installer.install(release, release.assets[0], target)

        assert result.path == target
        assert result.version == TEST_VERSION
        assert result.notices == []
        assert target.read_bytes() == b"\x7fELF downloaded"
        assert layout.marker_path.read_text().strip() == TEST_VERSION
        assert installer.installed_version() == TEST_VERSION

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
    def test_install_marks_executable(self, installer, release, layout):
        target = layout.binary_path(LINUX_ASSET)
        installer.install(release, release.assets[0], target)
        assert target.stat().st_mode & stat.S_IXUSR

    def test_install_overwrites_existing_binary(self, installer, release, installed_binary):
        installer.install(release, release.assets[0], installed_binary)
        assert installed_binary.read_bytes() == b"\x7fELF downloaded"

    def test_install_removes_superseded_binary(self, installer, layout, installed_binary):
        release = make_release("2.4.0", UNIVERSAL_ASSET)
        target = layout.binary_path(UNIVERSAL_ASSET)

        installer.install(release, release.assets[0], target)

        assert not installed_binary.exists()
        assert [p.name for p in layout.bin_dir.iterdir()] == [UNIVERSAL_ASSET]
        assert layout.marker_path.read_text() == "2.4.0"

    def test_superseded_binary_removal_failure_is_ignorable(self, installer, layout, installed_binary):
        release = make_release("2.4.0", UNIVERSAL_ASSET)
        target = layout.binary_path(UNIVERSAL_ASSET)

        with patch("pathlib.Path.unlink", side_effect=PermissionError("busy")):
            result = installer.install(release, release.assets[0], target)

        assert [n.kind for n in result.notices] == [IssueKind.IGNORABLE]
        assert result.notices[0].path == installed_binary

    def test_download_failure_leaves_binary_and_marker_untouched(
        self, mock_feed, installer, layout, installed_binary
    ):
        layout.marker_path.write_text("2.2.0\n")
        marker_before = layout.marker_path.read_text()
        mock_feed.download_asset.side_effect = FeedConnectionError("Download timed out")
        release = make_release("2.4.0", LINUX_ASSET)

        with pytest.raises(DownloadError) as exc_info:
            installer.install(release, release.assets[0], installed_binary)

        assert exc_info.value.asset_name == LINUX_ASSET
        assert layout.marker_path.read_text() == marker_before
        assert installed_binary.read_bytes() == b"\x7fELF installed"
        assert not any(p.name.endswith(".part") for p in layout.bin_dir.iterdir())

    def test_download_failure_without_prior_install(self, mock_feed, installer, release, layout):
        mock_feed.download_asset.side_effect = FeedConnectionError("offline")

        with pytest.raises(DownloadError):
            installer.install(release, release.assets[0], layout.binary_path(LINUX_ASSET))

        assert not layout.marker_path.exists()
        assert not layout.binary_path(LINUX_ASSET).exists()

    def test_chmod_failure_is_ignorable(self, installer, release, layout):
        target = layout.binary_path(LINUX_ASSET)

        with patch("pathlib.Path.chmod", side_effect=PermissionError("read-only fs")):
            result = installer.install(release, release.assets[0], target)

        assert len(result.notices) == 1
        assert result.notices[0].kind == IssueKind.IGNORABLE
        assert layout.marker_path.read_text().strip() == TEST_VERSION

    def test_marker_write_failure_propagates(self, mock_feed, layout, release):
        store = MagicMock()
        store.write.side_effect = VersionMarkerError(layout.marker_path, OSError("disk full"))
        installer = Installer(mock_feed, layout, version_store=store)

        with pytest.raises(VersionMarkerError):
            installer.install(release, release.assets[0], layout.binary_path(LINUX_ASSET))

    def test_progress_callback(self, mock_feed, installer, release, layout):
        def fake_download(asset, callback=None):
            callback(50, 100)
            callback(100, 100)
            return b"data"

        mock_feed.download_asset.side_effect = fake_download
        updates = []

        installer.install(release, release.assets[0], layout.binary_path(LINUX_ASSET), updates.append)

        assert [u.percentage for u in updates] == [50.0, 100.0]
        assert all(u.asset_name == LINUX_ASSET for u in updates)

    def test_clear(self, installer, layout, installed_binary):
        assert installer.clear() == 2
        assert not layout.bin_dir.exists()
        assert not layout.marker_path.exists()

    def test_clear_nothing_installed(self, installer):
        assert installer.clear() == 0


class TestDownloadProgress:
    """Tests for DownloadProgress dataclass."""

    def test_percentage_calculation(self):
        progress = DownloadProgress(asset_name="x", bytes_downloaded=500, total_bytes=1000)
        assert progress.percentage == 50.0

    def test_percentage_zero_total(self):
        progress = DownloadProgress(asset_name="x", bytes_downloaded=0, total_bytes=0)
        assert progress.percentage == 0.0
