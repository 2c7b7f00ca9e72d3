"""
Binary resolution orchestration.

BinaryLocator decides which dprint executable to launch and with which
arguments. Resolution walks four tiers in order and stops at the first
hit:

1. an explicit `binary.path` setting,
2. the project-local install when package.json or deno.json declares dprint,
3. the system search path,
4. the self-managed cache, installing the latest release when needed.

Nothing is persisted between resolutions; every call recomputes the path.

Usage:
    from dprintkit.locator import BinaryLocator, Worktree

    locator = BinaryLocator(Worktree("."), settings, cache_root)
    command = locator.command()
    subprocess.run([command.command, *command.args])
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from ..core.exceptions import DprintKitError
from ..core.interfaces import InstallationStatusObserver
from ..core.locking import LockManager
from ..core.platform import PlatformInfo
from ..release.assets import DPRINT_INSTALLER, AutoInstallerConfig
from ..release.index import GitHubReleaseClient
from ..release.installer import AutoInstaller
from .settings import Settings
from .sources import (
    AutoInstallSource,
    ChainedBinarySource,
    ExplicitPathSource,
    SearchPathSource,
    WorktreeSource,
)
from .worktree import Worktree

logger = logging.getLogger(__name__)

DEFAULT_ARGUMENTS = ["lsp"]


@dataclass
class LaunchCommand:
    """How to spawn the resolved tool. An empty env inherits the host's."""

    command: str
    args: List[str] = field(default_factory=list)
    env: Dict[str, str] = field(default_factory=dict)

    def argv(self) -> List[str]:
        return [self.command, *self.args]


class BinaryLocator:
    """
    Resolves the dprint executable for one worktree.

    Attributes:
        worktree: Project being served
        settings: Resolver settings (binary overrides)
        cache_root: Directory of the self-managed release cache
    """

    def __init__(
        self,
        worktree: Worktree,
        settings: Settings,
        cache_root: Path,
        client: Optional[GitHubReleaseClient] = None,
        observer: Optional[InstallationStatusObserver] = None,
        platform: Optional[PlatformInfo] = None,
        lock_manager: Optional[LockManager] = None,
        config: AutoInstallerConfig = DPRINT_INSTALLER,
    ):
        """
        Initialize the locator.

        Args:
            worktree: Project worktree
            settings: Loaded settings
            cache_root: Release cache directory
            client: Release index client (created from settings if None)
            observer: Installation status sink
            platform: Platform override (client's platform if None)
            lock_manager: Install lock (one on cache_root if None)
            config: Installer configuration
        """
        self.worktree = worktree
        self.settings = settings
        self.cache_root = Path(cache_root)
        self.client = client or GitHubReleaseClient(token=settings.github_token)
        self.observer = observer
        self.platform = platform
        self.lock_manager = lock_manager or LockManager(self.cache_root)
        self.config = config

    def create_installer(self) -> AutoInstaller:
        """Open an installer session (queries the release index)."""
        return AutoInstaller.try_new(
            self.config,
            self.cache_root,
            self.client,
            observer=self.observer,
            platform=self.platform,
            lock_manager=self.lock_manager,
        )

    def build_chain(self) -> ChainedBinarySource:
        """Resolution tiers in precedence order."""
        return ChainedBinarySource(
            [
                ExplicitPathSource(self.settings.binary),
                WorktreeSource(self.worktree),
                SearchPathSource(self.worktree, self.config.binary_basename),
                AutoInstallSource(self.create_installer),
            ]
        )

    def binary_path(self) -> str:
        """
        Resolve the executable path.

        Raises:
            InstallerError: If the self-install tier fails
        """
        path = self.build_chain().locate()
        if path is None:
            # Subclasses may build a chain without the cache tier
            raise DprintKitError("Could not resolve a dprint binary")
        return path

    def arguments(self) -> List[str]:
        """Configured arguments, or the language server subcommand."""
        if self.settings.binary.arguments is not None:
            return list(self.settings.binary.arguments)
        return list(DEFAULT_ARGUMENTS)

    def command(self) -> LaunchCommand:
        """Resolve the full launch command."""
        return LaunchCommand(command=self.binary_path(), args=self.arguments())


__all__ = ["BinaryLocator", "LaunchCommand", "DEFAULT_ARGUMENTS"]
