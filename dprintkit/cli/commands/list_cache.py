"""
List command implementation.

Lists entries of the release cache.
"""

import logging

from ..utils import create_cache_manager

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the list command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    cache = create_cache_manager(args)
    entries = cache.list_entries()

    if not entries:
        logger.info(f"No cached releases in {cache.cache_root}")
        return 0

    for entry in entries:
        if not entry.is_dir:
            state = "stray file"
        elif cache.is_version_installed(entry.version):
            state = "installed"
        else:
            state = "incomplete"
        print(f"{entry.version}\t{state}\t{entry.path}")

    return 0
