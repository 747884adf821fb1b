"""
Operation pipeline for release-tagger.

Operations are given as tokens on the command line, either ``name`` or
``name=argument``. All tokens are validated before any of them runs; they
are then applied in order against one version and tag context, stopping at
the first failure.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from loguru import logger

from .errors import (
    InvalidOperations,
    InvalidVersionFormat,
    OperationFailed,
    PreviousVersionUnparsable,
    ReleaseTaggerError,
)
from .git import Git
from .logging_config import VERBOSE
from .semver import Version
from .utils import CommandRunner, run_command


class OperationKind(Enum):
    """Known operations, keyed by their token name."""

    GIT = ('git=', 'Git program to use.')
    BUMP_MAJOR = ('bump-major', 'Bump the major version number.')
    BUMP_MINOR = ('bump-minor', 'Bump the minor version number.')
    BUMP_PATCH = ('bump-patch', 'Bump the patch level version number.')
    SET_VERSION = ('set-version=', 'Set explicit version.')
    SET_PRERELEASE = ('set-prerelease=', 'Set version pre-release field.')
    SET_BUILD = ('set-build=', 'Set version build field.')
    COMMIT = ('commit=', 'Commit to operate on. Default: HEAD')
    MESSAGE = ('message=', 'Message to inject into the tag.')
    SET_TAG_PREFIX = ('set-tag-prefix=', "Set tag prefix. Default 'v'.")
    TAG = ('tag', 'Create a tag.')

    def __init__(self, token_name: str, help_text: str):
        self.token_name = token_name
        self.help_text = help_text

    @classmethod
    def from_name(cls, name: str) -> Optional['OperationKind']:
        return _KINDS_BY_NAME.get(name)


_KINDS_BY_NAME: Dict[str, OperationKind] = {kind.token_name: kind for kind in OperationKind}

# Operations that work on top of the most recently tagged version
NEEDS_PREVIOUS_VERSION = frozenset({
    OperationKind.BUMP_MAJOR,
    OperationKind.BUMP_MINOR,
    OperationKind.BUMP_PATCH,
    OperationKind.SET_PRERELEASE,
    OperationKind.SET_BUILD,
    OperationKind.TAG,
})


def operation_name(token: str) -> str:
    """Name part of a token, including the '=' when there is one."""
    return parse_operation(token)[0]


def parse_operation(token: str) -> Tuple[str, str]:
    """
    Split a token into its operation name and argument.

    Args:
        token: Operation token such as "bump-major" or "set-build=ci.42"

    Returns:
        Tuple[str, str]: (name, argument); argument is everything after the
        first '=' and empty for tokens without one
    """
    name, sep, argument = token.partition('=')
    return name + sep, argument


def operation_table() -> Dict[str, str]:
    """Operation names mapped to their help text."""
    return {kind.token_name: kind.help_text for kind in OperationKind}


@dataclass
class PipelineContext:
    """State of one pipeline run."""
    version: Version = field(default_factory=Version)
    pending_message: str = ''
    tag_prefix: str = 'v'
    previous_version_resolved: bool = False
    last_error: Optional[Exception] = None
    created_tags: List[str] = field(default_factory=list)


class OperationPipeline:
    """Validates and applies operation tokens against a version and a git repository."""

    def __init__(self, git_program: str = 'git', commit: str = 'HEAD', tag_prefix: str = 'v',
                 dry_run: bool = False, runner: CommandRunner = run_command):
        self.git = Git(program=git_program, commit=commit, dry_run=dry_run, runner=runner)
        self.context = PipelineContext(tag_prefix=tag_prefix)
        self._handlers = {
            OperationKind.GIT: self._set_git,
            OperationKind.BUMP_MAJOR: self._bump_major,
            OperationKind.BUMP_MINOR: self._bump_minor,
            OperationKind.BUMP_PATCH: self._bump_patch,
            OperationKind.SET_VERSION: self._set_version,
            OperationKind.SET_PRERELEASE: self._set_prerelease,
            OperationKind.SET_BUILD: self._set_build,
            OperationKind.COMMIT: self._set_commit,
            OperationKind.MESSAGE: self._set_message,
            OperationKind.SET_TAG_PREFIX: self._set_tag_prefix,
            OperationKind.TAG: self._tag,
        }

        if dry_run:
            logger.log(VERBOSE, "Dry-run enabled. Not applying any changes.")

    def check_operations(self, tokens: Sequence[str]) -> None:
        """
        Validate every token before anything runs.

        Raises:
            InvalidOperations: Listing all unknown operation names at once
        """
        invalid = []
        for token in tokens:
            name = operation_name(token)
            if OperationKind.from_name(name) is None and name not in invalid:
                invalid.append(name)

        if invalid:
            raise InvalidOperations(invalid)

    def apply(self, tokens: Sequence[str]) -> PipelineContext:
        """
        Apply the tokens in order, stopping at the first failing one.

        Changes already made to the in-memory version are kept when a later
        operation fails.

        Returns:
            PipelineContext: The context after the last operation

        Raises:
            OperationFailed: Wrapping the first handler error
        """
        ctx = self.context
        for token in tokens:
            name, argument = parse_operation(token)
            kind = OperationKind.from_name(name)
            if kind is None:
                continue

            try:
                if kind in NEEDS_PREVIOUS_VERSION:
                    self.resolve_previous_version(ctx)
                self._handlers[kind](ctx, argument)
            except (ReleaseTaggerError, OSError) as e:
                ctx.last_error = e
                raise OperationFailed(token, e) from e

        return ctx

    def run(self, tokens: Sequence[str]) -> PipelineContext:
        """Validate, then apply, the tokens."""
        self.check_operations(tokens)
        return self.apply(tokens)

    def resolve_previous_version(self, ctx: PipelineContext) -> None:
        """
        Seed the version from the most recent tag, at most once per run.

        With no tags the version stays at 0.0.0.

        Raises:
            ExternalCommandFailed: If the log cannot be read
            PreviousVersionUnparsable: If the most recent tag is not a version
        """
        if ctx.previous_version_resolved:
            return
        ctx.previous_version_resolved = True

        tags = self.git.get_tags()
        if not tags:
            logger.log(VERBOSE, "No previous tags found, starting from 0.0.0")
            return

        tag = tags[0]
        version_text = tag[len(ctx.tag_prefix):] if ctx.tag_prefix and tag.startswith(ctx.tag_prefix) else tag
        logger.log(VERBOSE, f"Found {version_text} as previous version")

        try:
            ctx.version.set(version_text)
        except InvalidVersionFormat as e:
            raise PreviousVersionUnparsable(tag, version_text, e) from e

    def _set_git(self, ctx: PipelineContext, argument: str) -> None:
        logger.log(VERBOSE, f"Setting git to {argument}")
        self.git.program = argument

    def _bump_major(self, ctx: PipelineContext, argument: str) -> None:
        logger.log(VERBOSE, "Bumping major version")
        ctx.version.bump_major()

    def _bump_minor(self, ctx: PipelineContext, argument: str) -> None:
        logger.log(VERBOSE, "Bumping minor version")
        ctx.version.bump_minor()

    def _bump_patch(self, ctx: PipelineContext, argument: str) -> None:
        logger.log(VERBOSE, "Bumping patch level")
        ctx.version.bump_patch()

    def _set_version(self, ctx: PipelineContext, argument: str) -> None:
        logger.log(VERBOSE, f"Setting version to {argument}")
        ctx.version.set(argument)
        ctx.previous_version_resolved = True

    def _set_prerelease(self, ctx: PipelineContext, argument: str) -> None:
        logger.log(VERBOSE, f"Setting pre-release to {argument}")
        ctx.version.set_prerelease(argument)

    def _set_build(self, ctx: PipelineContext, argument: str) -> None:
        logger.log(VERBOSE, f"Setting build to {argument}")
        ctx.version.set_build(argument)

    def _set_commit(self, ctx: PipelineContext, argument: str) -> None:
        logger.log(VERBOSE, f"Setting git commit to: {argument}")
        self.git.commit = argument

    def _set_message(self, ctx: PipelineContext, argument: str) -> None:
        logger.log(VERBOSE, f"Injecting message to tag: {argument}")
        ctx.pending_message = argument

    def _set_tag_prefix(self, ctx: PipelineContext, argument: str) -> None:
        logger.log(VERBOSE, f"Setting the tag prefix to: {argument}")
        ctx.tag_prefix = argument

    def _tag(self, ctx: PipelineContext, argument: str) -> None:
        name = ctx.tag_prefix + str(ctx.version)
        logger.log(VERBOSE, f"Creating the git tag: {name}")
        if ctx.pending_message:
            logger.log(VERBOSE, f"Injecting message: {ctx.pending_message}")

        message = ctx.pending_message
        ctx.pending_message = ''
        self.git.create_tag(name, message)
        ctx.created_tags.append(name)
