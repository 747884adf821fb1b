"""
Release Tagger

Tags git commits with semantic versions derived from the most recent tag,
writing annotated tags whose message carries the shortlog since that tag.
"""

from ._version import __version__

__description__ = "Tag commits with semantic version"
