"""
Binary resolution.

This package implements the tiered lookup of the dprint executable:
explicit settings, project-local install, search path, self-managed cache.
"""

from .locator import BinaryLocator, LaunchCommand, DEFAULT_ARGUMENTS
from .manifest import is_dependency_declared, read_json_file
from .settings import BinarySettings, Settings, get_default_cache_dir, load_settings
from .sources import (
    AutoInstallSource,
    ChainedBinarySource,
    ExplicitPathSource,
    SearchPathSource,
    WorktreeSource,
)
from .worktree import Worktree

__all__ = [
    "BinaryLocator",
    "LaunchCommand",
    "DEFAULT_ARGUMENTS",
    "is_dependency_declared",
    "read_json_file",
    "BinarySettings",
    "Settings",
    "get_default_cache_dir",
    "load_settings",
    "AutoInstallSource",
    "ChainedBinarySource",
    "ExplicitPathSource",
    "SearchPathSource",
    "WorktreeSource",
    "Worktree",
]
