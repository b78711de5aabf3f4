"""
zigswitch CLI argument parser.

This module implements the command-line interface for zigswitch using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from zigswitch.cli.utils import print_error
from zigswitch.core.exceptions import InvalidVersionError, ZigSwitchError

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("zigswitch")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)

USAGE_EPILOG = """\
VERSION is one of:
  latest        the newest development build
  X.Y.Z         a numbered release, e.g. 0.11.0
  X.Y           shorthand for X.Y.0
  (omitted)     reuse the active version, or latest if none

environment:
  ZIGSWITCH_ROOT        install root (default: ~/.zigswitch)
  ZIGSWITCH_INDEX_URL   release index URL
  ZIGSWITCH_PLATFORM    release index platform key, e.g. x86_64-linux
  ZIGSWITCH_PROFILE     shell profile to add the PATH entry to
"""


class CLI:
    """zigswitch command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="zigswitch",
            description="Install Zig releases and switch the active version",
            epilog=USAGE_EPILOG,
            formatter_class=argparse.RawDescriptionHelpFormatter,
            allow_abbrev=False,
        )

        parser.add_argument(
            "token",
            nargs="*",
            metavar="VERSION",
            help="Version to install and activate",
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"zigswitch {__version__}"
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
            help="Path to configuration file (default: $ZIGSWITCH_ROOT/config.yaml)",
        )
        parser.add_argument(
            "--yes",
            "-y",
            action="store_true",
            help="Add the PATH entry to the shell profile without asking",
        )
        parser.add_argument(
            "--no-profile",
            action="store_true",
            help="Never offer to edit the shell profile",
        )

        listing = parser.add_mutually_exclusive_group()
        listing.add_argument(
            "--list", action="store_true", help="List installed versions"
        )
        listing.add_argument(
            "--list-remote",
            action="store_true",
            help="List versions available for this platform",
        )

        return parser

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Unknown options are collected rather than rejected, so that the
        caller can answer them with usage and a clean exit.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            (parsed arguments namespace, list of unrecognized arguments)
        """
        return self.parser.parse_known_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        This is the single place where errors become exit codes.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        try:
            parsed_args, unknown = self.parse_args(args)
        except SystemExit as e:
            # --help and --version exit 0; usage errors (code 2) get the
            # same usage-and-exit-0 answer as unknown arguments
            if e.code == 2:
                self.parser.print_help()
                return 0
            return e.code if isinstance(e.code, int) else 0

        self._configure_logging(parsed_args)

        tokens = parsed_args.token
        if unknown or len(tokens) > 1:
            extra = unknown or tokens[1:]
            print(f"Unrecognized argument: {' '.join(extra)}")
            self.parser.print_help()
            return 0
        parsed_args.token = tokens[0] if tokens else None

        try:
            from zigswitch.config import load_settings

            settings = load_settings(parsed_args.config)
            return self._dispatch_command(parsed_args, settings)
        except InvalidVersionError as e:
            print(str(e))
            self.parser.print_help()
            return e.exit_code
        except ZigSwitchError as e:
            print_error(str(e))
            print("Aborting.", file=sys.stderr)
            if parsed_args.verbose:
                logger.debug("Failure details", exc_info=True)
            return e.exit_code
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            print_error(f"Unexpected error: {e}")
            print("Aborting.", file=sys.stderr)
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
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

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args, settings) -> int:
        """
        Dispatch to the handler selected by the listing flags.

        Args:
            args: Parsed arguments
            settings: Resolved configuration

        Returns:
            Exit code from command handler
        """
        if args.list:
            command = ("zigswitch.cli.commands.list", "run")
        elif args.list_remote:
            command = ("zigswitch.cli.commands.list", "run_remote")
        else:
            command = ("zigswitch.cli.commands.use", "run")

        module_name, handler_name = command
        module = importlib.import_module(module_name)
        return getattr(module, handler_name)(args, settings)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
