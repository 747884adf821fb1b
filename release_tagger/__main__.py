"""
Entry point for python -m release_tagger

Allows running the package as a module:
    python -m release_tagger
"""

from .cli import main

if __name__ == '__main__':
    main()
