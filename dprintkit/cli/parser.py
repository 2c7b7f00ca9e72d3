"""
DprintKit CLI argument parser.

This module implements the command-line interface for DprintKit using argparse.
"""

import argparse
import importlib
import logging
import sys
import traceback
from pathlib import Path
from typing import List, Optional

from .. import __version__

logger = logging.getLogger(__name__)

# Command name -> module implementing run(args) -> int
COMMAND_MODULES = {
    "resolve": "dprintkit.cli.commands.resolve",
    "install": "dprintkit.cli.commands.install",
    "list": "dprintkit.cli.commands.list_cache",
    "clean": "dprintkit.cli.commands.clean",
    "run": "dprintkit.cli.commands.run",
}


class CLI:
    """DprintKit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="dprintkit",
            description="DprintKit - resolve, install and launch dprint",
            epilog='Use "dprintkit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"DprintKit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to settings file (default: ./dprintkit.yaml)",
        )
        parser.add_argument(
            "--project-root",
            type=Path,
            metavar="PATH",
            default=Path.cwd(),
            help="Project root directory (default: current directory)",
        )
        parser.add_argument(
            "--cache-dir",
            type=Path,
            metavar="PATH",
            help="Release cache directory (default: ~/.dprintkit/cache)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_resolve_command(subparsers)
        self._add_install_command(subparsers)
        self._add_list_command(subparsers)
        self._add_clean_command(subparsers)
        self._add_run_command(subparsers)

        return parser

    def _add_resolve_command(self, subparsers):
        """Add 'resolve' subcommand."""
        parser = subparsers.add_parser(
            "resolve",
            help="Print the command used to launch dprint",
            description="Resolve the dprint binary and its arguments",
        )
        parser.add_argument(
            "--json", action="store_true", help="Print the launch command as JSON"
        )

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        subparsers.add_parser(
            "install",
            help="Install the latest dprint release into the cache",
            description="Install the latest dprint release, ignoring other sources",
        )

    def _add_list_command(self, subparsers):
        """Add 'list' subcommand."""
        subparsers.add_parser(
            "list",
            help="List cached dprint releases",
            description="List entries of the release cache",
        )

    def _add_clean_command(self, subparsers):
        """Add 'clean' subcommand."""
        subparsers.add_parser(
            "clean",
            help="Remove cached dprint releases",
            description="Remove every dprint release from the cache",
        )

    def _add_run_command(self, subparsers):
        """Add 'run' subcommand."""
        parser = subparsers.add_parser(
            "run",
            help="Resolve and run dprint",
            description="Resolve dprint and run it; extra arguments replace the defaults",
        )
        parser.add_argument(
            "tool_args",
            nargs=argparse.REMAINDER,
            metavar="ARGS",
            help="Arguments passed to dprint",
        )

    def parse_args(self, args: Optional[List[str]] = None) -> argparse.Namespace:
        """Parse command-line arguments."""
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Parse arguments and run the selected command.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code: the command's, 1 on error, 130 on interrupt
        """
        parsed_args = self.parse_args(args)
        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Interrupted")
            return 130
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """Route log records to stderr at the level chosen by --verbose/--quiet."""
        if args.verbose:
            level, fmt = logging.DEBUG, "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level, fmt = logging.ERROR, "%(levelname)s: %(message)s"
        else:
            level, fmt = logging.INFO, "%(message)s"

        logging.basicConfig(level=level, format=fmt, stream=sys.stderr, force=True)

    def _dispatch_command(self, args) -> int:
        """Import the command module lazily and run it."""
        module_name = COMMAND_MODULES.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        return importlib.import_module(module_name).run(args)


def main():
    """Console script entry point."""
    sys.exit(CLI().run())


if __name__ == "__main__":
    main()
