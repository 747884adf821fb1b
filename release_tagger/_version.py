"""Version file - managed by setuptools-scm.

This file serves as a placeholder for development and is overwritten during builds.

Version derivation:
- Tagged commit (e.g., v2.3.0) → version is "2.3.0"
- Commits after tag → dev version like "2.3.1.dev5+g1234abc"
- No tags → fallback_version from pyproject.toml
"""

from typing import Tuple

# Placeholder values - overwritten by setuptools-scm during package build
# Matches fallback_version in pyproject.toml
__version__ = "0.0.0+unknown"
__version_tuple__: Tuple[int, int, int] = (0, 0, 0)
