"""
Semantic version value type.

Parses, renders and bumps versions of the form
``major.minor.patch[-prerelease][+build]`` as defined by https://semver.org/.
"""

import re
from dataclasses import dataclass

from .errors import InvalidVersionFormat

# Grammar from semver.org, restricted to ASCII digits so every numeric group
# is accepted by int().
_NUMBER = r'0|[1-9][0-9]*'
_PRERELEASE_ID = r'0|[1-9][0-9]*|[0-9]*[a-zA-Z-][0-9a-zA-Z-]*'
_BUILD_ID = r'[0-9a-zA-Z-]+'

_PRERELEASE = rf'(?:{_PRERELEASE_ID})(?:\.(?:{_PRERELEASE_ID}))*'
_BUILD = rf'{_BUILD_ID}(?:\.{_BUILD_ID})*'

PRERELEASE_RE = re.compile(_PRERELEASE)
BUILD_RE = re.compile(_BUILD)
SEMVER_RE = re.compile(
    rf'(?P<major>{_NUMBER})\.(?P<minor>{_NUMBER})\.(?P<patch>{_NUMBER})'
    rf'(?:-(?P<prerelease>{_PRERELEASE}))?'
    rf'(?:\+(?P<build>{_BUILD}))?'
)


def _to_int(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        # The grammar only lets decimal digits through
        raise AssertionError(f"Internal error on parsing version: {text}")


@dataclass
class Version:
    """A semantic version. Defaults to 0.0.0."""

    major: int = 0
    minor: int = 0
    patch: int = 0
    prerelease: str = ''
    build: str = ''

    @classmethod
    def parse(cls, text: str) -> 'Version':
        """
        Parse a semantic version string.

        Surrounding whitespace is ignored; the rest must match in full.

        Args:
            text: Version text such as "1.2.3-rc.1+build.5"

        Returns:
            Version: The parsed version

        Raises:
            InvalidVersionFormat: If the text is not a semantic version
        """
        text = text.strip()
        match = SEMVER_RE.fullmatch(text)
        if not match:
            raise InvalidVersionFormat(text)

        return cls(
            major=_to_int(match.group('major')),
            minor=_to_int(match.group('minor')),
            patch=_to_int(match.group('patch')),
            prerelease=match.group('prerelease') or '',
            build=match.group('build') or '',
        )

    def set(self, text: str) -> None:
        """Replace this version with the parsed text. Unchanged on failure."""
        parsed = Version.parse(text)
        self._replace_with(parsed)

    def _replace_with(self, other: 'Version') -> None:
        self.major = other.major
        self.minor = other.minor
        self.patch = other.patch
        self.prerelease = other.prerelease
        self.build = other.build

    def bump_major(self) -> None:
        """Start a new major release line."""
        self._replace_with(Version(major=self.major + 1))

    def bump_minor(self) -> None:
        """Start a new minor release line."""
        self._replace_with(Version(major=self.major, minor=self.minor + 1))

    def bump_patch(self) -> None:
        """Start a new patch level."""
        self._replace_with(Version(major=self.major, minor=self.minor, patch=self.patch + 1))

    def set_prerelease(self, prerelease: str) -> None:
        """Replace the pre-release qualifier; an empty string clears it."""
        if prerelease and not PRERELEASE_RE.fullmatch(prerelease):
            raise InvalidVersionFormat(f"{self.major}.{self.minor}.{self.patch}-{prerelease}")
        # A new pre-release invalidates the old build qualifier
        self.prerelease = prerelease
        self.build = ''

    def set_build(self, build: str) -> None:
        """Replace the build qualifier; an empty string clears it."""
        if build and not BUILD_RE.fullmatch(build):
            raise InvalidVersionFormat(f"{str(self).split('+')[0]}+{build}")
        self.build = build

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += f"-{self.prerelease}"
        if self.build:
            text += f"+{self.build}"
        return text
