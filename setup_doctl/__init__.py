"""
setup-doctl - install and cache doctl in CI jobs.

Resolves a requested doctl version (or ``latest``), reuses a cached
installation when present, and otherwise downloads the release archive,
falling back through recent releases when a download fails.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
