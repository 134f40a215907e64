"""Release directory clients."""

from .client import (
    DEFAULT_RECENT_COUNT,
    FALLBACK_VERSION,
    GitHubReleaseClient,
    MalformedReleaseResponse,
)

__all__ = [
    "DEFAULT_RECENT_COUNT",
    "FALLBACK_VERSION",
    "GitHubReleaseClient",
    "MalformedReleaseResponse",
]
