"""
Core functionality for setup-doctl.

This package contains the foundational modules that other components depend on.
"""

from .cache import ToolCache
from .download import DownloadError, HttpArchiveFetcher, download_file
from .exceptions import (
    SetupDoctlError,
    ConfigError,
    MissingInputError,
    CacheError,
    CacheLockTimeout,
    ResolutionError,
    ArtifactDownloadError,
    ExhaustedCandidatesError,
    AuthenticationError,
)
from .interfaces import ArchiveFetcher, CacheStore, ReleaseDirectory
from .platform import PlatformTarget, detect_platform, resolve_platform

__all__ = [
    "ToolCache",
    "DownloadError",
    "HttpArchiveFetcher",
    "download_file",
    "SetupDoctlError",
    "ConfigError",
    "MissingInputError",
    "CacheError",
    "CacheLockTimeout",
    "ResolutionError",
    "ArtifactDownloadError",
    "ExhaustedCandidatesError",
    "AuthenticationError",
    "ArchiveFetcher",
    "CacheStore",
    "ReleaseDirectory",
    "PlatformTarget",
    "detect_platform",
    "resolve_platform",
]
