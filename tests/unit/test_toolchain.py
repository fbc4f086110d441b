"""Unit tests for ToolchainLocator."""

import logging
import pytest

from wcls_launcher.toolchain.locator import (
    DEFAULT_TSDK,
    TSDK_MARKER,
    ToolchainLocator,
    is_valid_tsdk,
    normalize_path,
)

from tests.conftest import make_tsdk


class TestNormalizePath:
    """Tests for normalize_path."""

    def test_windows_strips_separator_before_drive(self):
        assert normalize_path("/C:/work/node_modules/typescript/lib", "win32") == (
            "C:\\work\\node_modules\\typescript\\lib"
        )

    def test_windows_backslash_rooted_drive(self):
        assert normalize_path("\\D:\\tools\\lib", "win32") == "D:\\tools\\lib"

    def test_windows_relative_path(self):
        assert normalize_path("node_modules/typescript/lib", "win32") == (
            "node_modules\\typescript\\lib"
        )

    def test_posix_unchanged(self):
        assert normalize_path("/C:/odd/but/valid", "linux") == "/C:/odd/but/valid"


class TestIsValidTsdk:

    def test_valid(self, tmp_path):
        assert is_valid_tsdk(make_tsdk(tmp_path))

    def test_directory_without_marker(self, tmp_path):
        assert not is_valid_tsdk(tmp_path)

    def test_missing_directory(self, tmp_path):
        assert not is_valid_tsdk(tmp_path / "nope")


class TestToolchainLocator:
    """Tests for the tsdk resolution order."""

    @pytest.fixture
    def workspace(self, tmp_path):
        root = tmp_path / "workspace"
        root.mkdir()
        return root

    @pytest.fixture
    def bundle(self, tmp_path):
        root = tmp_path / "bundle"
        root.mkdir()
        return root

    def test_override_wins(self, tmp_path, workspace, bundle):
        override = make_tsdk(tmp_path / "override")
        make_tsdk(workspace)
        make_tsdk(bundle)
        locator = ToolchainLocator(bundle_root=bundle, override=str(override), target_os="linux")

        assert locator.locate(workspace) == str(override)

    def test_workspace_before_bundle(self, workspace, bundle):
        workspace_lib = make_tsdk(workspace)
        make_tsdk(bundle)
        locator = ToolchainLocator(bundle_root=bundle, target_os="linux")

        assert locator.locate(workspace) == str(workspace_lib)

    def test_bundle_when_workspace_has_none(self, workspace, bundle):
        bundle_lib = make_tsdk(bundle)
        locator = ToolchainLocator(bundle_root=bundle, target_os="linux")

        assert locator.locate(workspace) == str(bundle_lib)

    def test_invalid_override_falls_through(self, tmp_path, workspace, bundle):
        bogus = tmp_path / "bogus"
        bogus.mkdir()
        workspace_lib = make_tsdk(workspace)
        locator = ToolchainLocator(bundle_root=bundle, override=str(bogus), target_os="linux")

        assert locator.locate(workspace) == str(workspace_lib)

    def test_search_paths_after_bundle(self, tmp_path, workspace, bundle):
        extra = make_tsdk(tmp_path / "extra")
        locator = ToolchainLocator(
            bundle_root=bundle, search_paths=[str(tmp_path / "missing"), str(extra)], target_os="linux"
        )

        assert locator.locate(workspace) == str(extra)

    def test_default_when_nothing_found(self, workspace, bundle, caplog):
        locator = ToolchainLocator(bundle_root=bundle, target_os="linux")

        with caplog.at_level(logging.WARNING, logger="wcls_launcher.toolchain"):
            result = locator.locate(workspace)

        assert result == DEFAULT_TSDK
        assert "WC_LS_TSDK" in caplog.text
        assert locator.resolved is None

    def test_default_normalized_for_windows(self):
        locator = ToolchainLocator(target_os="win32")
        assert locator.locate(None) == "node_modules\\typescript\\lib"

    def test_result_is_memoized(self, workspace, bundle):
        workspace_lib = make_tsdk(workspace)
        locator = ToolchainLocator(bundle_root=bundle, target_os="linux")

        first = locator.locate(workspace)
        (workspace_lib / TSDK_MARKER).unlink()
        make_tsdk(bundle)

        assert locator.locate(workspace) == first
        assert locator.resolved == str(workspace_lib)

    def test_default_is_not_memoized(self, workspace, bundle):
        locator = ToolchainLocator(bundle_root=bundle, target_os="linux")
        assert locator.locate(workspace) == DEFAULT_TSDK

        workspace_lib = make_tsdk(workspace)

        assert locator.locate(workspace) == str(workspace_lib)

    def test_override_validated_once(self, tmp_path, workspace, bundle):
        override = tmp_path / "override"
        override.mkdir()
        locator = ToolchainLocator(bundle_root=bundle, override=str(override), target_os="linux")
        locator.locate(workspace)

        # Becoming valid later does not matter, the first check is kept
        (override / TSDK_MARKER).write_text("")

        assert locator.locate(workspace) == DEFAULT_TSDK

    def test_windows_result_is_normalized(self, workspace):
        workspace_lib = make_tsdk(workspace)
        locator = ToolchainLocator(target_os="win32")

        result = locator.locate(workspace)

        assert "/" not in result
        assert result == str(workspace_lib).replace("/", "\\")
