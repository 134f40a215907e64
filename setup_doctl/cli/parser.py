"""
setup-doctl CLI argument parser.

This module implements the command-line interface using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from setup_doctl import __version__
from setup_doctl.actions.workflow import WorkflowCommandHandler

logger = logging.getLogger(__name__)


class CLI:
    """setup-doctl command-line interface."""

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
            prog="setup-doctl",
            description="Install and cache doctl for CI jobs",
            epilog='Use "setup-doctl COMMAND --help" for command-specific help',
        )

        parser.add_argument(
            "--version", action="version", version=f"setup-doctl {__version__}"
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
            help="Path to a YAML configuration file",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_run_command(subparsers)
        self._add_install_command(subparsers)
        self._add_cache_command(subparsers)

        return parser

    def _add_install_options(self, parser: argparse.ArgumentParser):
        parser.add_argument(
            "--cache-dir",
            type=Path,
            metavar="PATH",
            help="Tool cache root (default: $RUNNER_TOOL_CACHE or ~/.setup-doctl/tool-cache)",
        )
        parser.add_argument(
            "--fallback-count",
            type=int,
            metavar="N",
            help="Number of recent releases to fall back to [default: 5]",
        )
        parser.add_argument(
            "--timeout",
            type=int,
            metavar="SECONDS",
            help="Per-request timeout [default: 60]",
        )
        parser.add_argument(
            "--platform",
            metavar="NAME",
            help="Target platform (linux|darwin|win32) [default: host]",
        )
        parser.add_argument(
            "--arch",
            metavar="NAME",
            help="Target architecture (x64|arm64|ia32) [default: host]",
        )

    def _add_run_command(self, subparsers):
        """Add 'run' subcommand."""
        parser = subparsers.add_parser(
            "run",
            help="Run as a GitHub Action step",
            description=(
                "Read action inputs from the environment, install doctl, "
                "add it to PATH and authenticate"
            ),
        )
        self._add_install_options(parser)

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            help="Install doctl into the tool cache",
            description="Resolve, download and cache a doctl release",
        )
        parser.add_argument(
            "tool_version",
            nargs="?",
            metavar="VERSION",
            help="Version to install, or 'latest' [default: latest]",
        )
        self._add_install_options(parser)

    def _add_cache_command(self, subparsers):
        """Add 'cache' subcommand."""
        parser = subparsers.add_parser(
            "cache",
            help="Inspect the tool cache",
            description="Inspect cached doctl installations",
        )
        parser.add_argument(
            "cache_command",
            choices=["list"],
            metavar="ACTION",
            help="Cache action (list)",
        )
        parser.add_argument(
            "--cache-dir",
            type=Path,
            metavar="PATH",
            help="Tool cache root",
        )
        parser.add_argument(
            "--platform",
            metavar="NAME",
            help="Platform to list [default: host]",
        )
        parser.add_argument(
            "--arch",
            metavar="NAME",
            help="Architecture to list [default: host]",
        )

    def run(self, argv: Optional[List[str]] = None) -> int:
        """
        Parse arguments and execute command.

        Args:
            argv: Command-line arguments (default: sys.argv[1:])

        Returns:
            Exit code (0 for success, non-zero for errors)
        """
        args = self.parser.parse_args(argv)

        if not args.command:
            self.parser.print_help()
            return 1

        self._configure_logging(args)

        return self._dispatch_command(args)

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        The run command logs through workflow commands so that warnings and
        errors are annotated on the job.
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        if args.command == "run":
            handler = WorkflowCommandHandler()
            handler.setFormatter(logging.Formatter("%(message)s"))
            logging.basicConfig(level=level, handlers=[handler], force=True)
        else:
            logging.basicConfig(level=level, format=format_str, force=True)

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Returns:
            Exit code from command handler
        """
        command_map = {
            "run": "setup_doctl.cli.commands.run",
            "install": "setup_doctl.cli.commands.install",
            "cache": "setup_doctl.cli.commands.cache",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
