"""Installed version marker.

A single plain-text file next to the ``bin`` directory holding the tag of
the last successfully installed release.
"""

import logging
from pathlib import Path
from typing import Optional

from wcls_launcher.updater.exceptions import VersionMarkerError

logger = logging.getLogger("wcls_launcher.version_store")


class VersionStore:
    """Reads and writes the installed version marker."""

    def __init__(self, marker_path: Path):
        self._marker_path = Path(marker_path)

    @property
    def marker_path(self) -> Path:
        return self._marker_path

    def read(self) -> Optional[str]:
        """
        Read the recorded version.

        Returns:
            Version tag, or None if no install is recorded or the marker
            cannot be read
        """
        try:
            version = self._marker_path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to read version marker {self._marker_path}: {e}")
            return None
        return version or None

    def write(self, version: str) -> None:
        """
        Record an installed version.

        Raises:
            VersionMarkerError: If the marker cannot be written
        """
        try:
            self._marker_path.parent.mkdir(parents=True, exist_ok=True)
            self._marker_path.write_text(version, encoding="utf-8")
        except OSError as e:
            raise VersionMarkerError(self._marker_path, e)
        logger.debug(f"Recorded installed version {version}")

    def clear(self) -> bool:
        """Remove the marker. Returns True if a marker was removed."""
        try:
            self._marker_path.unlink()
            return True
        except FileNotFoundError:
            return False
