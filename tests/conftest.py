"""
Pytest configuration and shared fixtures for test suite.

Provides a scripted stand-in for the external command runner so the git
interaction can be tested without a real repository.
"""

import pytest

from release_tagger.errors import ExternalCommandFailed


class FakeGitRunner:
    """Answers git commands from canned output and records every call."""

    def __init__(self, log_text='', shortlog='', toplevel='/home/dev/widget\n', fail_on=None):
        self.log_text = log_text
        self.shortlog = shortlog
        self.toplevel = toplevel
        self.fail_on = set(fail_on or [])
        self.calls = []

    def __call__(self, args):
        args = list(args)
        self.calls.append(args)
        subcommand = args[1]
        if subcommand in self.fail_on:
            raise ExternalCommandFailed(args, returncode=128, stderr=f"fatal: {subcommand} failed")
        if subcommand == 'log':
            return self.log_text
        if subcommand == 'shortlog':
            return self.shortlog
        if subcommand == 'rev-parse':
            return self.toplevel
        if subcommand == 'tag':
            return ''
        raise AssertionError(f"unexpected command: {args}")

    def subcommands(self):
        return [call[1] for call in self.calls]

    def calls_for(self, subcommand):
        return [call for call in self.calls if call[1] == subcommand]


@pytest.fixture
def fake_runner():
    """A runner for a repository without any tags."""
    return FakeGitRunner(shortlog='Jane Doe (1):\n      Initial commit\n\n')


@pytest.fixture
def tagged_runner():
    """A runner for a repository whose latest tag is v1.4.2."""
    log_text = (
        'HEAD -> main, origin/main\n'
        '\n'
        'tag: v1.4.2\n'
        '\n'
        'tag: v1.4.1, tag: legacy-1.4.1\n'
        'tag: v1.4.0\n'
    )
    return FakeGitRunner(
        log_text=log_text,
        shortlog='Jane Doe (2):\n      Add widget\n      Fix widget\n\n',
    )
