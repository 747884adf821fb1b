"""
Command-line interface for release-tagger.

Main entry point that wires configuration, logging and the operation
pipeline together and turns failures into a non-zero exit status.
"""

import argparse
import platform
import re
import sys
from importlib import metadata
from typing import List, Optional

from loguru import logger
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import VALID_LOG_LEVELS, load_config
from .errors import ReleaseTaggerError
from .logging_config import setup_logging
from .operations import OperationPipeline, operation_table

PROGRAM_NAME = 'release-tagger'
DISTRIBUTION_NAME = 'release-tagger'
REQUIREMENT_NAME_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9._-]*")

# Shared console for coordinated logging and output
console = Console()


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog=PROGRAM_NAME,
        description='Tag commits with semantic version',
        epilog='Use --list to see the available operations.',
    )
    parser.add_argument('operations', nargs='*', metavar='OPERATION', help='Operations to apply in order')

    parser.add_argument('-v', '--version', action='store_true', help='Display version.')
    parser.add_argument('-l', '--list', action='store_true', help='List operations.')
    parser.add_argument('-V', '--verbose', action='store_true', help='Enable verbose output.')
    parser.add_argument('-D', '--dryrun', action='store_true',
                        help="Don't actually run any operations. Implies --verbose.")
    parser.add_argument('--licenses', action='store_true', help=f'Print the licenses of the libraries {PROGRAM_NAME} uses.')

    # Defaults for the operations that reconfigure git
    parser.add_argument('--git', help='Git program to use (default: git)')
    parser.add_argument('--commit', help='Commit to operate on (default: HEAD)')
    parser.add_argument('--tag-prefix', help="Tag prefix (default: 'v')")

    parser.add_argument('--log-level', choices=VALID_LOG_LEVELS + [level.lower() for level in VALID_LOG_LEVELS],
                        help='Logging level (default: INFO)')
    return parser


def version_string() -> str:
    """Version banner shown by --version."""
    return (
        f"{PROGRAM_NAME}: {__version__}\n"
        f"Built with: {platform.python_implementation()}/{platform.python_version()} "
        f"for {platform.system().lower()}/{platform.machine()}"
    )


def list_operations() -> None:
    """Print the available operations."""
    table = Table(title='Operations', show_header=False, box=None, padding=(0, 2))
    for name, help_text in sorted(operation_table().items()):
        table.add_row(name, help_text)
    console.print(table)


def dependency_licenses() -> List[tuple]:
    """
    Collect license information of the runtime dependencies.

    Returns:
        List[tuple]: (name, version, license) for each installed requirement
    """
    try:
        requirements = metadata.requires(DISTRIBUTION_NAME) or []
    except metadata.PackageNotFoundError:
        logger.debug(f"{DISTRIBUTION_NAME} is not installed, no dependency metadata available")
        return []

    licenses = []
    for requirement in requirements:
        # Skip extras such as test dependencies
        if 'extra ==' in requirement:
            continue
        match = REQUIREMENT_NAME_RE.match(requirement)
        if not match:
            continue
        name = match.group(0)
        try:
            dist = metadata.distribution(name)
        except metadata.PackageNotFoundError:
            continue
        license_text = dist.metadata.get('License-Expression') or dist.metadata.get('License') or 'UNKNOWN'
        licenses.append((name, dist.version, license_text.splitlines()[0] if license_text else 'UNKNOWN'))
    return licenses


def print_licenses() -> None:
    """Print the licenses of the runtime dependencies."""
    table = Table(title=f'Licenses of {PROGRAM_NAME} dependencies')
    table.add_column('Package')
    table.add_column('Version')
    table.add_column('License')
    for name, version, license_text in dependency_licenses():
        table.add_row(name, version, license_text)
    console.print(table)


def fault(err: Exception, message: str) -> None:
    """Report a failure as a single line and exit with status 1."""
    logger.error(f"{message}: {err}")
    sys.exit(1)


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the application."""
    setup_logging(console=console)

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        console.print(version_string(), markup=False, highlight=False)
        sys.exit(0)

    if args.licenses:
        print_licenses()
        sys.exit(0)

    if args.list:
        list_operations()
        sys.exit(0)

    config = load_config(args)
    if config is None:
        sys.exit(1)

    setup_logging(config.effective_log_level, console=console)

    if not args.operations:
        parser.print_usage(sys.stderr)
        sys.exit(1)

    pipeline = OperationPipeline(
        git_program=config.git_program,
        commit=config.commit,
        tag_prefix=config.tag_prefix,
        dry_run=config.dry_run,
    )

    try:
        pipeline.check_operations(args.operations)
    except ReleaseTaggerError as e:
        fault(e, 'Validating given operations failed')

    try:
        pipeline.apply(args.operations)
    except ReleaseTaggerError as e:
        fault(e, 'Applying operations failed')

    sys.exit(0)


if __name__ == '__main__':
    main()
