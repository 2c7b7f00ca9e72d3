"""
Run command implementation.

Resolves dprint and runs it, forwarding its exit code.
"""

import logging
import os
import subprocess

from ..utils import create_locator

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the run command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code of dprint
    """
    locator = create_locator(args)
    command = locator.command()

    tool_args = list(args.tool_args or [])
    if tool_args and tool_args[0] == "--":
        tool_args = tool_args[1:]
    if tool_args:
        command.args = tool_args

    env = {**os.environ, **command.env}
    logger.debug(f"Running: {command.argv()}")

    try:
        result = subprocess.run(command.argv(), env=env)
    except OSError as e:
        logger.error(f"Failed to launch {command.command}: {e}")
        return 1

    return result.returncode
