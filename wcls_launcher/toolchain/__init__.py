"""TypeScript SDK discovery for the language server."""

from .locator import (
    ToolchainLocator,
    normalize_path,
    is_valid_tsdk,
    DEFAULT_TSDK,
    TSDK_MARKER,
)

__all__ = [
    "ToolchainLocator",
    "normalize_path",
    "is_valid_tsdk",
    "DEFAULT_TSDK",
    "TSDK_MARKER",
]
