"""
Centralized exception hierarchy for setup-doctl.

This module defines the custom exceptions used across the codebase so that
callers can distinguish recoverable per-attempt failures from fatal ones.
"""

from typing import Sequence


# ============================================================================
# Base Exceptions
# ============================================================================


class SetupDoctlError(Exception):
    """Base exception for all setup-doctl errors."""

    pass


# ============================================================================
# Configuration and Input Exceptions
# ============================================================================


class ConfigError(SetupDoctlError):
    """Configuration parsing or validation error."""

    pass


class MissingInputError(SetupDoctlError):
    """Raised when a required action input was not supplied."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Input required and not supplied: {name}")


# ============================================================================
# Cache Exceptions
# ============================================================================


class CacheError(SetupDoctlError):
    """Raised when the tool cache index cannot be read or written."""

    pass


class CacheLockTimeout(CacheError):
    """Raised when the cache lock cannot be acquired within timeout."""

    pass


# ============================================================================
# Resolution Exceptions
# ============================================================================


class ResolutionError(SetupDoctlError):
    """Base exception for version resolution errors."""

    pass


class ArtifactDownloadError(ResolutionError):
    """Raised when the archive for a single version cannot be fetched."""

    def __init__(self, version: str, reason: str):
        self.version = version
        self.reason = reason
        super().__init__(f"Download failed for version {version}: {reason}")


class ExhaustedCandidatesError(ResolutionError):
    """Raised when every candidate version failed to download."""

    def __init__(self, tool_name: str, attempted: Sequence[str]):
        self.tool_name = tool_name
        self.attempted = list(attempted)
        super().__init__(
            f"Failed to download {tool_name}. "
            f"Tried versions: {', '.join(self.attempted)}"
        )


# ============================================================================
# Authentication Exceptions
# ============================================================================


class AuthenticationError(SetupDoctlError):
    """Raised when authenticating the installed binary fails."""

    pass
