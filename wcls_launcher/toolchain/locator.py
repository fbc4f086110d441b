"""TypeScript SDK (tsdk) location.

The language server needs the ``typescript/lib`` directory of a TypeScript
install. Candidates are tried in a fixed order: operator override, the
workspace's ``node_modules``, the launcher install's ``node_modules``,
extra search paths, and finally a relative default that is not checked.
"""

import logging
import re
import sys
from pathlib import Path
from typing import List, Optional

from wcls_launcher.config.settings import ENV_TSDK
from wcls_launcher.utils.chain import ResolutionChain, StepResult

logger = logging.getLogger("wcls_launcher.toolchain")


TSDK_RELATIVE_PATH = "node_modules/typescript/lib"

# File that must exist inside a usable tsdk directory
TSDK_MARKER = "tsserverlibrary.js"

DEFAULT_TSDK = TSDK_RELATIVE_PATH

_ROOTED_DRIVE = re.compile(r"^[\\/]+([A-Za-z]:)")


def normalize_path(path: str, target_os: str = sys.platform) -> str:
    """
    Normalize a path string for the target OS.

    On Windows, a separator in front of a drive letter (``/C:/x``, as
    produced by URI-style joining) is stripped and separators become
    backslashes. Other platforms get the path back unchanged.
    """
    if not target_os.startswith("win"):
        return path
    path = _ROOTED_DRIVE.sub(r"\1", path)
    return path.replace("/", "\\")


def is_valid_tsdk(candidate: Path) -> bool:
    """True if candidate is a directory containing the tsdk marker file."""
    return (Path(candidate) / TSDK_MARKER).is_file()


class ToolchainLocator:
    """
    Locates the TypeScript SDK for one server session.

    The first validated result is memoized for the locator's lifetime.
    """

    def __init__(
        self,
        bundle_root: Optional[Path] = None,
        override: Optional[str] = None,
        search_paths: Optional[List[str]] = None,
        target_os: str = sys.platform,
    ):
        """
        Initialize the locator.

        Args:
            bundle_root: Launcher install root, searched after the workspace
            override: Operator-supplied tsdk directory
            search_paths: Extra directories tried before the default
            target_os: OS the path is normalized for (sys.platform style)
        """
        self._bundle_root = Path(bundle_root) if bundle_root else None
        self._override = override or None
        self._search_paths = list(search_paths or [])
        self._target_os = target_os
        self._override_valid: Optional[bool] = None
        self._resolved: Optional[str] = None

    @property
    def resolved(self) -> Optional[str]:
        """Memoized tsdk path, if one has been validated."""
        return self._resolved

    def locate(self, workspace_root: Optional[Path] = None) -> str:
        """
        Locate the tsdk directory.

        Args:
            workspace_root: Root of the current workspace, if any

        Returns:
            Normalized tsdk path; the unvalidated default when no candidate
            is usable
        """
        if self._resolved is not None:
            return self._resolved

        chain = ResolutionChain("tsdk", [
            ("override", self._from_override),
            ("workspace", lambda: self._from_root(workspace_root, "workspace")),
            ("bundle", lambda: self._from_root(self._bundle_root, "bundle")),
        ])
        for index, search_path in enumerate(self._search_paths):
            chain.add_step(
                f"search path {index + 1}",
                lambda p=search_path: self._validate(Path(p)),
            )

        result = chain.run()
        if result.accepted:
            self._resolved = normalize_path(str(result.value), self._target_os)
            logger.info(f"Using TypeScript SDK from {result.step}: {self._resolved}")
            return self._resolved

        logger.warning(
            f"No TypeScript SDK found (tried {', '.join(chain.step_names)}); "
            f"falling back to '{DEFAULT_TSDK}'. Set {ENV_TSDK} to point at a "
            f"typescript/lib directory."
        )
        return normalize_path(DEFAULT_TSDK, self._target_os)

    def _from_override(self) -> StepResult:
        if self._override is None:
            return StepResult.skip("no override configured")
        if self._override_valid is None:
            self._override_valid = is_valid_tsdk(Path(self._override))
            if not self._override_valid:
                logger.warning(
                    f"{ENV_TSDK} override '{self._override}' has no {TSDK_MARKER}, ignoring it"
                )
        if not self._override_valid:
            return StepResult.skip(f"override '{self._override}' is not a tsdk directory")
        return StepResult.accept(Path(self._override))

    def _from_root(self, root: Optional[Path], label: str) -> StepResult:
        if root is None:
            return StepResult.skip(f"no {label} root")
        return self._validate(Path(root) / TSDK_RELATIVE_PATH)

    @staticmethod
    def _validate(candidate: Path) -> StepResult:
        if is_valid_tsdk(candidate):
            return StepResult.accept(candidate)
        return StepResult.skip(f"{candidate} has no {TSDK_MARKER}")
