"""Platform detection and release asset selection.

Maps the host operating system and CPU architecture onto the name of the
release asset to install and whether it needs the Node.js runtime.
"""

import platform
import sys
from dataclasses import dataclass
from typing import Dict, Optional, Tuple


ASSET_PREFIX = "wc-language-server"

# Interpreted bundle that runs anywhere Node.js is available
UNIVERSAL_ASSET = f"{ASSET_PREFIX}.js"


@dataclass(frozen=True)
class AssetSelection:
    """Release asset chosen for a platform."""
    asset_name: str
    requires_runtime: bool

    @property
    def is_universal(self) -> bool:
        """True if this is the interpreted fallback asset."""
        return self.asset_name == UNIVERSAL_ASSET


UNIVERSAL_SELECTION = AssetSelection(UNIVERSAL_ASSET, requires_runtime=True)

NATIVE_ASSETS: Dict[Tuple[str, str], str] = {
    ("linux", "x64"): f"{ASSET_PREFIX}-linux-x64",
    ("linux", "arm64"): f"{ASSET_PREFIX}-linux-arm64",
    ("darwin", "x64"): f"{ASSET_PREFIX}-macos-x64",
    ("darwin", "arm64"): f"{ASSET_PREFIX}-macos-arm64",
    ("windows", "x64"): f"{ASSET_PREFIX}-windows-x64.exe",
}

_OS_ALIASES = {
    "win32": "windows",
    "cygwin": "windows",
    "windows": "windows",
    "darwin": "darwin",
    "macos": "darwin",
    "linux": "linux",
}

_ARCH_ALIASES = {
    "x86_64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
}


def normalize_os(os_name: str) -> str:
    """Normalize an OS identifier (sys.platform style) to linux/darwin/windows."""
    name = (os_name or "").strip().lower()
    if name.startswith("linux"):
        return "linux"
    return _OS_ALIASES.get(name, name)


def normalize_arch(arch: str) -> str:
    """Normalize a CPU architecture identifier to x64/arm64."""
    name = (arch or "").strip().lower()
    return _ARCH_ALIASES.get(name, name)


def select_asset(os_name: str, arch: str) -> AssetSelection:
    """
    Select the release asset for a platform.

    Never fails: unknown platforms get the universal interpreted asset.

    Args:
        os_name: Raw OS identifier (e.g. "linux", "win32", "darwin")
        arch: Raw architecture identifier (e.g. "x86_64", "aarch64")

    Returns:
        AssetSelection for the platform
    """
    key = (normalize_os(os_name), normalize_arch(arch))
    asset_name = NATIVE_ASSETS.get(key)
    if asset_name is None:
        return UNIVERSAL_SELECTION
    return AssetSelection(asset_name, requires_runtime=False)


def current_platform() -> Tuple[str, str]:
    """Return the raw (OS, architecture) identifiers of this host."""
    return sys.platform, platform.machine()


def select_current_asset(platform_id: Optional[Tuple[str, str]] = None) -> AssetSelection:
    """Select the asset for the running host (or an explicit platform pair)."""
    os_name, arch = platform_id or current_platform()
    return select_asset(os_name, arch)
