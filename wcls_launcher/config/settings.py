"""Launcher settings management.

Provides LauncherSettings dataclass, environment overrides and
SettingsManager for persistence.
"""

import json
import os
from dataclasses import dataclass, field, asdict, replace
from pathlib import Path
from typing import List, Mapping, Optional

from wcls_launcher.config.paths import get_settings_path


# Operator override variables
ENV_SERVER_PATH = "WC_LANGUAGE_SERVER_PATH"
ENV_NODE_PATH = "WC_LANGUAGE_SERVER_NODE"
ENV_TSDK = "WC_LS_TSDK"
ENV_INSTALL_DIR = "WC_LS_INSTALL_DIR"
ENV_LOG_LEVEL = "WC_LS_LOG_LEVEL"


@dataclass
class LauncherSettings:
    """Launcher settings that persist between sessions."""

    # Release feed
    repository: str = "wc-toolkit/wc-language-server"
    allow_prerelease: bool = False
    auto_check_updates: bool = True
    request_timeout: Optional[float] = None

    # Install location (empty means the platform default)
    install_dir: str = ""

    # Operator overrides
    server_path: str = ""
    node_path: str = ""
    tsdk: str = ""
    tsdk_search_paths: List[str] = field(default_factory=list)

    log_level: str = "INFO"

    def to_dict(self) -> dict:
        """Convert settings to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "LauncherSettings":
        """Create settings from dictionary, ignoring unknown keys."""
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_fields}
        return cls(**filtered)

    def with_environment(self, environ: Optional[Mapping[str, str]] = None) -> "LauncherSettings":
        """
        Apply operator override variables on top of these settings.

        Empty variables are ignored.

        Args:
            environ: Environment mapping (default: os.environ)

        Returns:
            New LauncherSettings with overrides applied
        """
        environ = os.environ if environ is None else environ
        overrides = {}
        for var, name in (
            (ENV_SERVER_PATH, "server_path"),
            (ENV_NODE_PATH, "node_path"),
            (ENV_TSDK, "tsdk"),
            (ENV_INSTALL_DIR, "install_dir"),
            (ENV_LOG_LEVEL, "log_level"),
        ):
            value = environ.get(var, "").strip()
            if value:
                overrides[name] = value
        return replace(self, **overrides)


class SettingsManager:
    """Manages launcher settings persistence."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize settings manager.

        Args:
            config_path: Optional custom path, defaults to platform standard
        """
        self._config_path = config_path or get_settings_path()
        self._settings: Optional[LauncherSettings] = None

    @property
    def config_path(self) -> Path:
        """Path to settings file."""
        return self._config_path

    def load(self) -> LauncherSettings:
        """
        Load settings from disk.

        Returns:
            LauncherSettings instance (defaults if file not found)
        """
        if self._config_path.exists():
            try:
                with open(self._config_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                self._settings = LauncherSettings.from_dict(data)
            except (json.JSONDecodeError, IOError, AttributeError):
                # Invalid or unreadable file, use defaults
                self._settings = LauncherSettings()
        else:
            self._settings = LauncherSettings()

        return self._settings

    def save(self, settings: LauncherSettings) -> None:
        """
        Persist settings to disk.

        Args:
            settings: Settings to save
        """
        self._settings = settings

        # Ensure parent directory exists
        self._config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self._config_path, "w", encoding="utf-8") as f:
            json.dump(settings.to_dict(), f, indent=2)

    def reset(self) -> LauncherSettings:
        """
        Reset to default settings.

        Returns:
            Default LauncherSettings instance
        """
        self._settings = LauncherSettings()

        # Remove existing file
        if self._config_path.exists():
            self._config_path.unlink()

        return self._settings
