"""
DprintKit - resolve, install and launch the dprint formatter.

Usage:
    from dprintkit import BinaryLocator, Worktree, load_settings

    worktree = Worktree(".")
    settings = load_settings(worktree.root)
    locator = BinaryLocator(worktree, settings, cache_root)
    print(locator.command().argv())
"""

__version__ = "0.1.0"

from .locator import BinaryLocator, LaunchCommand, Worktree, load_settings  # noqa: E402

__all__ = ["BinaryLocator", "LaunchCommand", "Worktree", "load_settings", "__version__"]
