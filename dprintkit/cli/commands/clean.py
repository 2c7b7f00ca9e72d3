"""
Clean command implementation.

Removes every release from the cache. Runs under the install lock so it
cannot interleave with another process installing into the same cache.
"""

import logging

from ...core.locking import LockManager
from ..utils import create_cache_manager

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the clean command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    cache = create_cache_manager(args)

    with LockManager(cache.cache_root).install_lock():
        removed = cache.purge_other_versions()

    logger.info(f"Removed {len(removed)} cached release(s) from {cache.cache_root}")
    return 0
