"""
Core interfaces for setup-doctl.

The fallback resolver depends only on these abstract collaborators, so the
concrete GitHub client, HTTP fetcher and filesystem cache can be swapped for
fakes in tests.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional


class ReleaseDirectory(ABC):
    """Source of release names for a tool."""

    @abstractmethod
    def get_latest_release(self) -> str:
        """
        Get the name of the newest release.

        Implementations must not raise: on failure they return a fixed
        fallback version and log a warning.
        """
        pass

    @abstractmethod
    def get_recent_releases(self, count: int = 5) -> List[str]:
        """
        Get the names of the ``count`` most recent releases, newest first.

        Implementations must not raise: on failure they return a
        single-element list with a fixed fallback version.
        """
        pass


class CacheStore(ABC):
    """Key-value store of extracted installations keyed by (name, version)."""

    @abstractmethod
    def find(self, name: str, version: str) -> Optional[Path]:
        """
        Find a cached installation.

        Returns:
            Path to the cached directory, or None on a miss
        """
        pass

    @abstractmethod
    def save(self, source_dir: Path, name: str, version: str) -> Path:
        """
        Store an extracted installation.

        Args:
            source_dir: Directory holding the extracted tool
            name: Tool name
            version: Concrete version string

        Returns:
            Path to the cached copy
        """
        pass


class ArchiveFetcher(ABC):
    """Downloads an archive and unpacks it into a local directory."""

    @abstractmethod
    def fetch_and_unpack(self, url: str) -> Path:
        """
        Download ``url`` and extract it.

        Implementations perform no retries and raise a descriptive error for
        HTTP error statuses, timeouts and corrupt archives.

        Returns:
            Path to the extracted directory
        """
        pass


__all__ = [
    "ReleaseDirectory",
    "CacheStore",
    "ArchiveFetcher",
]
