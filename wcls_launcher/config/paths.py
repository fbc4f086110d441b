"""Path constants and discovery for the language server launcher.

Defines application data directories and the layout of a managed
language server install.
"""

import os
import sys
from dataclasses import dataclass
from pathlib import Path


# Application name for config directories
APP_NAME = "wc-language-server-launcher"

BIN_DIR_NAME = "bin"
VERSION_MARKER_NAME = "version.txt"


@dataclass(frozen=True)
class InstallLayout:
    """Filesystem layout of a managed install rooted at ``root``."""
    root: Path

    @property
    def bin_dir(self) -> Path:
        """Directory holding installed executables and scripts."""
        return self.root / BIN_DIR_NAME

    @property
    def marker_path(self) -> Path:
        """Version marker, a sibling of the bin directory."""
        return self.root / VERSION_MARKER_NAME

    def binary_path(self, asset_name: str) -> Path:
        """Installed location of a release asset."""
        return self.bin_dir / asset_name


def get_app_data_dir() -> Path:
    """
    Get the application data directory.

    Returns:
        Path to app data directory (created if not exists)

    Platform-specific locations:
        - Windows: %APPDATA%/wc-language-server-launcher
        - Linux: ~/.config/wc-language-server-launcher
        - macOS: ~/Library/Application Support/wc-language-server-launcher
    """
    if sys.platform == "win32":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))

    app_dir = base / APP_NAME
    app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


def get_settings_path() -> Path:
    """
    Get the path to the settings JSON file.

    Returns:
        Path to settings.json
    """
    return get_app_data_dir() / "settings.json"


def get_install_dir() -> Path:
    """
    Get the default root of the managed language server install.

    Not created here; the installer creates it on first download.
    """
    return get_app_data_dir() / "server"


def get_log_dir() -> Path:
    """
    Get the directory for log files.

    Returns:
        Path to logs directory (created if not exists)
    """
    log_dir = get_app_data_dir() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def get_log_file_path() -> Path:
    """Get the path to the main log file."""
    return get_log_dir() / "launcher.log"
