"""
Host platform detection for setup-doctl.

Release artifacts are selected from the host identifiers the Actions runtime
uses (``linux``/``darwin``/``win32`` and ``x64``/``arm64``/``ia32``). This
module translates Python's ``platform`` values into those identifiers.

Usage:
    from setup_doctl.core.platform import detect_platform

    target = detect_platform()
    print(f"Running on {target}")  # e.g. linux-x64
"""

import functools
import platform
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PlatformTarget:
    """
    Host operating system and CPU architecture.

    Attributes:
        platform: OS identifier ('linux', 'darwin', 'win32', or anything else)
        arch: CPU identifier ('x64', 'arm64', 'ia32', or anything else)
    """

    platform: str
    arch: str

    def __str__(self) -> str:
        return f"{self.platform}-{self.arch}"


def _detect_os() -> str:
    """
    Detect operating system.

    Unknown systems are returned lowercased as-is; the artifact locator
    substitutes a default for them.
    """
    system = platform.system().lower()

    if system == "windows":
        return "win32"
    elif system == "darwin":
        return "darwin"
    elif system == "linux":
        return "linux"
    return system


def _detect_architecture() -> str:
    """Detect CPU architecture."""
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i686", "x86"):
        return "ia32"
    return machine


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformTarget:
    """
    Detect the current host.

    This function is cached - it only runs detection once per process.
    """
    return PlatformTarget(platform=_detect_os(), arch=_detect_architecture())


def resolve_platform(
    platform_override: Optional[str] = None, arch_override: Optional[str] = None
) -> PlatformTarget:
    """
    Get the host target, with optional per-field overrides from configuration.

    Example:
        >>> resolve_platform("win32", None)
        PlatformTarget(platform='win32', arch='x64')
    """
    host = detect_platform()
    return PlatformTarget(
        platform=platform_override or host.platform,
        arch=arch_override or host.arch,
    )


def clear_platform_cache():
    """Force the next call to detect_platform() to re-detect."""
    detect_platform.cache_clear()


__all__ = [
    "PlatformTarget",
    "detect_platform",
    "resolve_platform",
    "clear_platform_cache",
]
