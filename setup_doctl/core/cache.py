"""
Local tool cache keyed by tool name and version.

Extracted installations live under ``<root>/<name>/<version>/<platform>-<arch>/``
and are indexed in ``<root>/registry.json``. The index entry is written
atomically after the directory copy completes, so a reader never sees a
half-copied installation as a hit.
"""

import json
import logging
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from filelock import FileLock, Timeout

from setup_doctl.core.directory import get_tool_cache_dir
from setup_doctl.core.exceptions import CacheError, CacheLockTimeout
from setup_doctl.core.filesystem import (
    FilesystemError,
    atomic_write,
    recursive_copy,
    safe_rmtree,
)
from setup_doctl.core.interfaces import CacheStore
from setup_doctl.core.platform import PlatformTarget, detect_platform

logger = logging.getLogger(__name__)

REGISTRY_VERSION = 1


def _entry_key(name: str, version: str, target: str) -> str:
    return f"{name}/{version}/{target}"


class ToolCache(CacheStore):
    """
    Filesystem tool cache with a locked JSON index.

    Entries are qualified by the full target, so caches shared between
    platforms or architectures never hand out a foreign binary. Entries are
    never expired by this class; they live as long as the cache root does
    (a CI run, or a shared cache volume).

    Example:
        >>> cache = ToolCache(Path("/opt/hostedtoolcache"), PlatformTarget("linux", "x64"))
        >>> path = cache.find("doctl", "1.98.1")
        >>> if path is None:
        ...     path = cache.save(extracted_dir, "doctl", "1.98.1")
    """

    def __init__(
        self,
        root: Optional[Path] = None,
        target: Optional[PlatformTarget] = None,
        lock_timeout: int = 30,
    ):
        """
        Initialize tool cache.

        Args:
            root: Cache root (default: $RUNNER_TOOL_CACHE or ~/.setup-doctl/tool-cache)
            target: Platform and architecture qualifier for entries (default: host)
            lock_timeout: Timeout in seconds for acquiring the index lock
        """
        self.root = Path(root) if root else get_tool_cache_dir()
        self.target = target or detect_platform()
        self.registry_path = self.root / "registry.json"
        self.lock_path = self.root / "lock" / "registry.lock"
        self.lock_timeout = lock_timeout

        logger.debug(f"Initialized tool cache at {self.root} ({self.target})")

    def _empty_registry(self) -> dict:
        return {"version": REGISTRY_VERSION, "tools": {}}

    def _load_registry(self) -> dict:
        """
        Load the index from disk.

        An unreadable or malformed index is treated as empty; the next save
        replaces it.
        """
        if not self.registry_path.exists():
            return self._empty_registry()

        try:
            with open(self.registry_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            logger.warning(f"Failed to load cache index, treating cache as empty: {e}")
            return self._empty_registry()

        if not isinstance(data, dict) or not isinstance(data.get("tools"), dict):
            logger.warning("Invalid cache index format, resetting")
            return self._empty_registry()

        return data

    def _save_registry(self, data: dict):
        """Save the index atomically."""
        try:
            atomic_write(self.registry_path, json.dumps(data, indent=2))
        except OSError as e:
            logger.error(f"Failed to save cache index: {e}")
            raise CacheError(f"Failed to save cache index: {e}") from e

    @contextmanager
    def _lock(self):
        """
        Acquire the exclusive index lock.

        Raises:
            CacheLockTimeout: If lock cannot be acquired within timeout
        """
        self.lock_path.parent.mkdir(parents=True, exist_ok=True)
        lock = FileLock(self.lock_path, timeout=self.lock_timeout)

        try:
            with lock:
                yield
        except Timeout as e:
            raise CacheLockTimeout(
                f"Could not acquire cache lock within {self.lock_timeout} seconds"
            ) from e

    @property
    def qualifier(self) -> str:
        """Target qualifier used in entry keys and directories, e.g. ``linux-x64``."""
        return str(self.target)

    def entry_dir(self, name: str, version: str) -> Path:
        """Directory an installation of (name, version) is stored in."""
        return self.root / name / version / self.qualifier

    def find(self, name: str, version: str) -> Optional[Path]:
        """
        Find a cached installation.

        An index entry whose directory no longer exists counts as a miss.

        Returns:
            Path to the cached directory, or None
        """
        if not name or not version:
            raise ValueError("Tool name and version are required")

        data = self._load_registry()
        entry = data["tools"].get(_entry_key(name, version, self.qualifier))
        if entry is None:
            logger.debug(f"Cache miss: {name} {version} ({self.qualifier})")
            return None

        path = Path(entry.get("path", ""))
        if not entry.get("path") or not path.is_dir():
            logger.warning(f"Cached directory for {name} {version} is missing: {path}")
            return None

        logger.debug(f"Cache hit: {name} {version} -> {path}")
        return path

    def save(self, source_dir: Path, name: str, version: str) -> Path:
        """
        Copy an extracted installation into the cache and index it.

        An existing entry for the same key is overwritten, as is an
        unreadable index.

        Returns:
            Path to the cached copy

        Raises:
            CacheError: If the copy or the index write fails
        """
        source_dir = Path(source_dir)
        destination = self.entry_dir(name, version)

        try:
            safe_rmtree(destination, require_prefix=self.root)
            recursive_copy(source_dir, destination)
        except (FilesystemError, ValueError) as e:
            raise CacheError(f"Failed to cache {name} {version}: {e}") from e

        with self._lock():
            data = self._load_registry()
            data["tools"][_entry_key(name, version, self.qualifier)] = {
                "name": name,
                "version": version,
                "platform": self.target.platform,
                "arch": self.target.arch,
                "path": str(destination.resolve()),
                "cached": datetime.now().isoformat(),
            }
            self._save_registry(data)

        logger.info(f"Cached {name} {version} at {destination}")
        return destination

    def list_versions(self, name: str) -> List[str]:
        """
        List cached versions of a tool for this cache's target.

        Example:
            >>> cache.list_versions("doctl")
            ['1.98.1', '1.100.0']
        """
        data = self._load_registry()
        return [
            entry["version"]
            for entry in data["tools"].values()
            if entry.get("name") == name
            and entry.get("platform") == self.target.platform
            and entry.get("arch") == self.target.arch
        ]

    def get_entry(self, name: str, version: str) -> Optional[Dict]:
        """Get the raw index entry for (name, version), if any."""
        data = self._load_registry()
        return data["tools"].get(_entry_key(name, version, self.qualifier))


__all__ = ["ToolCache"]
