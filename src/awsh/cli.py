from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from awsh.lib.config_parser import load_config

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure logging.

    Args:
        verbose: Enable debug logging
        quiet: Suppress info logging
    """
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    # botocore is chatty at DEBUG
    if not verbose:
        logging.getLogger('botocore').setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog='awsh',
        description="Interactive AWS shell with session variables",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  awsh                                  # interactive shell\n"
            "  awsh -e 'sts get-caller-identity'     # run one command\n"
            "  awsh --script setup.awsh              # run commands from a file\n"
        ),
    )

    run = parser.add_argument_group('Running Commands')
    run.add_argument(
        '--execute', '-e',
        metavar='COMMAND',
        help='Execute a single shell command and exit (e.g., "s3 ls")'
    )
    run.add_argument(
        '--script',
        type=Path,
        metavar='PATH',
        help='Execute shell commands from a file and exit'
    )

    aws = parser.add_argument_group('AWS Options')
    aws.add_argument(
        '--config', '-c',
        type=Path,
        default=None,
        help='Path to configuration file (default: ~/.awsh.yaml if present)'
    )
    aws.add_argument(
        '--profile', '-p',
        help='AWS profile to use (overrides AWS_PROFILE)'
    )
    aws.add_argument(
        '--region', '-r',
        help='AWS region to use (overrides AWS_REGION / AWS_DEFAULT_REGION)'
    )
    aws.add_argument(
        '--output', '-o',
        choices=['table', 'json'],
        help='Output format (default: table)'
    )

    general = parser.add_argument_group('General Options')
    general.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose (debug) logging'
    )
    general.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Suppress informational output'
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point.

    Args:
        argv: Command line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose, args.quiet)

    try:
        config = load_config(
            args.config,
            profile=args.profile,
            region=args.region,
            output=args.output,
        )
    except (FileNotFoundError, ValueError, ValidationError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    from awsh.shell import ShellSession, run_command, run_repl, run_script

    session = ShellSession(config=config)

    if args.execute is not None:
        try:
            result = run_command(args.execute, session)
            if result is not None:
                print(str(result).rstrip('\n'))
            return 0
        except SystemExit:
            return 0
        except Exception as e:
            logger.error(f"Command failed: {e}")
            if args.verbose:
                logger.exception("Full traceback:")
            return 1

    if args.script is not None:
        try:
            run_script(args.script, session)
            return 0
        except Exception:
            return 1

    logger.debug("Starting interactive shell...")
    run_repl(session)
    return 0
