"""
Git interaction for release-tagger.

Discovers version tags from decorated log output and creates annotated tags
whose message carries the shortlog since the previous tag.
"""

import os
import re
from dataclasses import dataclass, field
from typing import List, Optional

from loguru import logger

from .errors import ExternalCommandFailed, TagCreationFailed
from .logging_config import VERBOSE
from .utils import CommandRunner, format_command_line, run_command, run_command_one_line

TAG_MARKER = "tag: "
TAG_DELIMITER_RE = re.compile(r"[,\n\r]")


def scan_tags(log_text: str) -> List[str]:
    """
    Extract tag names from decorated log text.

    Tags appear as ``tag: <name>`` terminated by a comma, newline or
    carriage return. Names are returned in text order without
    deduplication. Truncated text simply ends the scan.

    Args:
        log_text: Output of ``git log --format=%D``

    Returns:
        List[str]: Tag names, most recent first when the log is
    """
    tags = []
    position = 0

    while True:
        start = log_text.find(TAG_MARKER, position)
        if start < 0:
            break
        start += len(TAG_MARKER)

        match = TAG_DELIMITER_RE.search(log_text, start)
        if match is None:
            break
        end = match.start()

        tag = log_text[start:end]
        if tag:
            tags.append(tag)
        position = end + 1

    return tags


@dataclass
class TagRequest:
    """An annotated tag about to be created."""
    name: str
    target_commit: str
    message: str
    command: List[str] = field(default_factory=list)


@dataclass
class Git:
    """Git repository access through an external command runner."""

    program: str = 'git'
    commit: str = 'HEAD'
    dry_run: bool = False
    runner: CommandRunner = run_command
    tags: Optional[List[str]] = None
    repo_name: Optional[str] = None

    def get_tags(self) -> List[str]:
        """Scan the log of the repository for tags, once per instance."""
        if self.tags is not None:
            return self.tags

        log_text = self.runner([self.program, 'log', '--format=%D'])
        self.tags = scan_tags(log_text)
        logger.debug(f"Found {len(self.tags)} tag(s): {self.tags}")
        return self.tags

    def get_shortlog(self, start: str, end: str) -> str:
        """Shortlog of start..end, or of end alone when start is empty."""
        commit_range = f"{start}..{end}" if start else end
        return self.runner([self.program, 'shortlog', commit_range])

    def get_repo_name(self) -> str:
        """Base name of the repository's top level directory."""
        if self.repo_name:
            return self.repo_name

        args = [self.program, 'rev-parse', '--show-toplevel']
        try:
            toplevel = run_command_one_line(self.runner, args)
        except ExternalCommandFailed as e:
            raise ExternalCommandFailed(args, reason=f"could not determine repo root directory ({e})") from e
        if not toplevel:
            raise ExternalCommandFailed(args, reason="could not determine repo root directory")

        self.repo_name = os.path.basename(toplevel.rstrip('/\\'))
        return self.repo_name

    def create_tag(self, name: str, message: str = '') -> TagRequest:
        """
        Create an annotated tag on the configured commit.

        The message is the given text (or "<repo> <name>") followed by a
        blank line and the shortlog since the most recent tag found by
        get_tags(). Without a prior scan the shortlog covers the bare target.

        Args:
            name: Full tag name including any prefix
            message: Optional message to put at the top of the tag

        Returns:
            TagRequest: The request that was, or under dry-run would have been, submitted

        Raises:
            ExternalCommandFailed: If the shortlog or repo name lookup fails
            TagCreationFailed: If the tag command fails
        """
        # Only tags already scanned by version discovery count
        tags = self.tags or []
        previous_tag = tags[0] if tags else ''
        shortlog = self.get_shortlog(previous_tag, self.commit)

        if not message:
            message = f"{self.get_repo_name()} {name}"
        message = f"{message}\n\n{shortlog}"

        cmdline = [self.program, 'tag', '--annotate', '-m', message, name, self.commit]
        request = TagRequest(name=name, target_commit=self.commit, message=message, command=cmdline)
        logger.log(VERBOSE, f"Running: {format_command_line(cmdline)}")

        if self.dry_run:
            return request

        try:
            self.runner(cmdline)
        except (ExternalCommandFailed, OSError) as e:
            raise TagCreationFailed(name, e) from e

        logger.info(f"Created tag {name} on {self.commit}")
        return request
