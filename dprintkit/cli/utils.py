"""
Shared utilities for CLI commands.

Builds the locator and cache handles every command works with from the
global command-line options.
"""

import logging
from pathlib import Path
from typing import Optional

from ..core.download import DownloadProgress
from ..core.platform import detect_platform
from ..locator.locator import BinaryLocator
from ..locator.settings import Settings, get_default_cache_dir, load_settings
from ..locator.worktree import Worktree
from ..release.assets import DPRINT_INSTALLER
from ..release.cache import VersionedCacheManager
from ..release.index import GitHubReleaseClient

logger = logging.getLogger(__name__)


def resolve_project_root(path: Optional[Path] = None) -> Path:
    """
    Resolve project root directory.

    Args:
        path: Optional path (defaults to current directory)

    Returns:
        Resolved absolute path
    """
    if path is None:
        path = Path.cwd()
    return path.resolve()


def load_cli_settings(args) -> Settings:
    """Load settings for the project selected on the command line."""
    project_root = resolve_project_root(getattr(args, "project_root", None))
    return load_settings(project_root, getattr(args, "config", None))


def resolve_cache_root(args, settings: Settings) -> Path:
    """
    Pick the cache root: --cache-dir, then settings/env, then the default.
    """
    cache_dir = getattr(args, "cache_dir", None)
    if cache_dir:
        return Path(cache_dir).expanduser().resolve()
    if settings.cache_dir:
        return settings.cache_dir.resolve()
    return get_default_cache_dir()


def _log_progress(progress: DownloadProgress) -> None:
    logger.info(f"  {progress}")


def create_locator(args, show_progress: bool = False) -> BinaryLocator:
    """Build a BinaryLocator from parsed command-line arguments."""
    settings = load_cli_settings(args)
    worktree = Worktree(resolve_project_root(getattr(args, "project_root", None)))
    client = GitHubReleaseClient(
        token=settings.github_token,
        progress_callback=_log_progress if show_progress else None,
    )
    cache_root = resolve_cache_root(args, settings)
    logger.debug(f"Using cache root: {cache_root}")
    return BinaryLocator(worktree, settings, cache_root, client=client)


def create_cache_manager(args) -> VersionedCacheManager:
    """Build a cache manager for the cache root selected on the command line."""
    settings = load_cli_settings(args)
    return VersionedCacheManager(
        resolve_cache_root(args, settings), DPRINT_INSTALLER, detect_platform()
    )

