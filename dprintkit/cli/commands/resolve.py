"""
Resolve command implementation.

Prints the command a host would use to launch dprint.
"""

import json
import logging
import shlex

from ..utils import create_locator

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the resolve command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    locator = create_locator(args)
    command = locator.command()

    if args.json:
        print(
            json.dumps(
                {"command": command.command, "args": command.args, "env": command.env},
                indent=2,
            )
        )
    else:
        print(shlex.join(command.argv()))

    return 0
