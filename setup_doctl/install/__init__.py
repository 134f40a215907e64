"""
Version resolution and artifact download.

Exports the artifact locator and the fallback resolver.
"""

from .locator import (
    TOOL_NAME,
    ArtifactLocation,
    ArtifactLocator,
    build_download_url,
    map_architecture,
    map_platform,
)
from .resolver import (
    Attempt,
    AttemptKind,
    AttemptResult,
    FallbackResolver,
    InstallResult,
    VersionRequest,
    fallback_plan,
    normalize_version,
    primary_plan,
)

__all__ = [
    "TOOL_NAME",
    "ArtifactLocation",
    "ArtifactLocator",
    "build_download_url",
    "map_architecture",
    "map_platform",
    "Attempt",
    "AttemptKind",
    "AttemptResult",
    "FallbackResolver",
    "InstallResult",
    "VersionRequest",
    "fallback_plan",
    "normalize_version",
    "primary_plan",
]
