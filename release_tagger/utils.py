"""
Utility functions for release-tagger.

Contains the blocking "run an external program and capture its output"
primitive used for every git invocation.
"""

import subprocess
from typing import Callable, Sequence

from loguru import logger

from .errors import ExternalCommandFailed

# Signature of the command runner: argument list in, captured stdout out
CommandRunner = Callable[[Sequence[str]], str]


def run_command(args: Sequence[str]) -> str:
    """
    Run an external command and return its standard output.

    Args:
        args: Program followed by its arguments

    Returns:
        str: Captured standard output

    Raises:
        ExternalCommandFailed: If the program cannot be started or exits
            with a non-zero status
    """
    args = list(args)
    logger.debug(f"Executing: {args}")
    try:
        result = subprocess.run(args, capture_output=True, text=True, encoding='utf-8', errors='replace')
    except OSError as e:
        raise ExternalCommandFailed(args, reason=str(e)) from e

    if result.returncode != 0:
        raise ExternalCommandFailed(args, returncode=result.returncode, stderr=result.stderr or '')

    return result.stdout


def run_command_one_line(runner: CommandRunner, args: Sequence[str]) -> str:
    """Run a command through runner and return its output with surrounding whitespace removed."""
    return runner(args).strip(" \n\r\t")


def format_command_line(cmdline: Sequence[str]) -> str:
    """Render an argument list for log output."""
    return ' '.join(cmdline)
