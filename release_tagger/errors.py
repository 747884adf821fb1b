"""
Exception types for release-tagger.

Every failure the tool can report derives from ReleaseTaggerError so the
command line can turn it into a single error line and a non-zero exit.
"""

from typing import Iterable, List, Optional, Sequence


class ReleaseTaggerError(Exception):
    """Base class for all release-tagger errors."""


class InvalidVersionFormat(ReleaseTaggerError, ValueError):
    """Text is not a valid semantic version."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Invalid semantic version: {text}")


class InvalidOperations(ReleaseTaggerError):
    """One or more operation names are not recognized."""

    def __init__(self, names: Iterable[str]):
        self.names: List[str] = list(names)
        suffix = "" if len(self.names) == 1 else "s"
        super().__init__(f"Invalid operation{suffix}: {', '.join(self.names)}")


class PreviousVersionUnparsable(ReleaseTaggerError):
    """The most recent tag does not hold a semantic version."""

    def __init__(self, tag: str, version_text: str, cause: Exception):
        self.tag = tag
        self.version_text = version_text
        self.cause = cause
        super().__init__(
            f'Parsing previous version "{version_text}" (tag "{tag}") failed with: {cause}'
        )


class OperationFailed(ReleaseTaggerError):
    """An operation handler failed; carries the literal operation token."""

    def __init__(self, token: str, cause: Exception):
        self.token = token
        self.cause = cause
        super().__init__(f'Operation "{token}" failed with: {cause}')


class ExternalCommandFailed(ReleaseTaggerError):
    """An external command could not run or exited with a non-zero status."""

    def __init__(self, args: Sequence[str], returncode: Optional[int] = None, stderr: str = '', reason: str = ''):
        self.command = list(args)
        self.returncode = returncode
        self.stderr = stderr
        cmdline = ' '.join(self.command)
        if reason:
            message = f"Running '{cmdline}' failed: {reason}"
        else:
            message = f"Running '{cmdline}' failed with exit status {returncode}"
        detail = stderr.strip()
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class TagCreationFailed(ReleaseTaggerError):
    """The annotated tag could not be created."""

    def __init__(self, name: str, cause: Exception):
        self.name = name
        self.cause = cause
        super().__init__(f'Creating tag "{name}" failed with: {cause}')
