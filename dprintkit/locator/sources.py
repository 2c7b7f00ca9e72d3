"""
Binary source implementations.

Each source is one tier of the resolution chain. The first three only
inspect settings, manifests and the search path and never raise; the
self-install source downloads releases and propagates its errors.
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional

from ..core.interfaces import BinarySource
from ..release.installer import AutoInstaller
from .manifest import NODE_PACKAGE_NAME, is_dependency_declared
from .settings import BinarySettings
from .worktree import Worktree

logger = logging.getLogger(__name__)

WORKTREE_BINARY_PATH = "node_modules/.bin/dprint"
BINARY_BASENAME = "dprint"


class ExplicitPathSource(BinarySource):
    """Uses the configured binary path verbatim. Only an unset path defers."""

    name = "settings"

    def __init__(self, settings: BinarySettings):
        self._settings = settings

    def locate(self) -> Optional[str]:
        return self._settings.path


class WorktreeSource(BinarySource):
    """
    Uses the project-local install when a manifest declares the package.

    The path is returned without checking that it exists; installing
    project dependencies is the project's own responsibility.
    """

    name = "worktree"

    def __init__(
        self,
        worktree: Worktree,
        package_name: str = NODE_PACKAGE_NAME,
        binary_path: str = WORKTREE_BINARY_PATH,
    ):
        self._worktree = worktree
        self._package_name = package_name
        self._binary_path = binary_path

    def locate(self) -> Optional[str]:
        if not is_dependency_declared(self._worktree, self._package_name):
            return None
        return str(Path(self._worktree.root_path()) / self._binary_path)


class SearchPathSource(BinarySource):
    """Looks the executable up on the search path."""

    name = "path"

    def __init__(self, worktree: Worktree, binary_basename: str = BINARY_BASENAME):
        self._worktree = worktree
        self._binary_basename = binary_basename

    def locate(self) -> Optional[str]:
        return self._worktree.which(self._binary_basename)


class AutoInstallSource(BinarySource):
    """Installs the latest release into the cache and returns its binary."""

    name = "cache"

    def __init__(self, installer_factory: Callable[[], AutoInstaller]):
        """
        Args:
            installer_factory: Creates the installer session. Called lazily
                so the release index is only queried when this tier runs.
        """
        self._installer_factory = installer_factory

    def locate(self) -> Optional[str]:
        installer = self._installer_factory()
        return str(installer.ensure_installed())


class ChainedBinarySource(BinarySource):
    """
    Chains multiple sources together.

    Tries each source in order and returns the first path found. A source
    that returns None defers to the next one; any string, even an empty
    one, ends resolution.

    Attributes:
        sources: Tiers in precedence order
        last_source: The tier that produced the last result
    """

    name = "chain"

    def __init__(self, sources: List[BinarySource]):
        self.sources = list(sources)
        self.last_source: Optional[BinarySource] = None

    def locate(self) -> Optional[str]:
        for source in self.sources:
            path = source.locate()
            if path is not None:
                logger.debug(f"Resolved dprint via {source.name}: {path}")
                self.last_source = source
                return path
        return None


__all__ = [
    "ExplicitPathSource",
    "WorktreeSource",
    "SearchPathSource",
    "AutoInstallSource",
    "ChainedBinarySource",
    "WORKTREE_BINARY_PATH",
    "BINARY_BASENAME",
]
