"""
Install command implementation.

Installs the latest release into the cache regardless of settings,
project-local installs or the search path.
"""

import logging

from ..utils import create_locator

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    locator = create_locator(args, show_progress=True)
    installer = locator.create_installer()

    logger.info(f"Latest dprint release: {installer.version}")
    binary_path = installer.ensure_installed()

    print(binary_path)
    return 0
