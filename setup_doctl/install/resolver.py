"""
Version resolution with cache lookup and ordered download fallback.

The resolver turns a requested version specifier into an installed tool:

1. Normalize the request, resolving ``latest`` through the release directory
2. Return a cached installation when one exists (no network activity)
3. Try the resolved version
4. On failure, try the explicitly requested version once more, then each
   recent release in the order the directory returned them
5. Raise ExhaustedCandidatesError listing every attempted version

Retry policy is data: the attempts form an ordered list of Attempt values,
and a single loop runs them and records an AttemptResult for each.
"""

import enum
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from setup_doctl.core.exceptions import (
    ArtifactDownloadError,
    ConfigError,
    ExhaustedCandidatesError,
)
from setup_doctl.core.interfaces import CacheStore, ReleaseDirectory
from setup_doctl.install.locator import TOOL_NAME, ArtifactLocator
from setup_doctl.releases.client import DEFAULT_RECENT_COUNT

logger = logging.getLogger(__name__)

LATEST = "latest"


def normalize_version(version: str) -> str:
    """
    Strip surrounding whitespace and one leading ``v``.

    Example:
        >>> normalize_version(" v1.98.1 ")
        '1.98.1'
        >>> normalize_version(normalize_version("v1.98.1"))
        '1.98.1'
    """
    version = version.strip()
    if version.startswith("v"):
        version = version[1:]
    return version


def is_latest(specifier: Optional[str]) -> bool:
    """True for an empty specifier or ``latest`` in any case."""
    return not specifier or not specifier.strip() or specifier.strip().lower() == LATEST


@dataclass(frozen=True)
class VersionRequest:
    """A normalized version request."""

    specifier: str
    """``latest`` or the explicit version as the user gave it"""

    version: str
    """Concrete version to look up and download first"""

    @property
    def explicit(self) -> bool:
        return self.specifier != LATEST


class AttemptKind(enum.Enum):
    """Why a version is being attempted."""

    PRIMARY = "primary"
    REQUESTED_RETRY = "requested-retry"
    RECENT_RELEASE = "recent-release"


@dataclass(frozen=True)
class Attempt:
    version: str
    kind: AttemptKind


@dataclass(frozen=True)
class AttemptResult:
    """Outcome of one download attempt."""

    attempt: Attempt
    path: Optional[Path] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.path is not None


@dataclass
class InstallResult:
    """Final outcome of a resolution."""

    path: Path
    version: str
    requested: str
    from_cache: bool = False
    attempts: List[AttemptResult] = field(default_factory=list)

    @property
    def fell_back(self) -> bool:
        """True when the installed version differs from the first one tried."""
        if not self.attempts:
            return False
        return self.attempts[0].attempt.version != self.version


def primary_plan(request: VersionRequest) -> List[Attempt]:
    return [Attempt(request.version, AttemptKind.PRIMARY)]


def fallback_plan(request: VersionRequest, recent: Iterable[str]) -> List[Attempt]:
    """
    Build the ordered fallback attempts.

    An explicit request is retried once before the recent releases. The
    recent releases keep the directory's order; duplicates are kept.

    Example:
        >>> plan = fallback_plan(VersionRequest("v1.98.0", "1.98.0"), ["1.101.0", "1.100.0"])
        >>> [(a.version, a.kind.value) for a in plan]
        [('1.98.0', 'requested-retry'), ('1.101.0', 'recent-release'), ('1.100.0', 'recent-release')]
    """
    attempts = []
    if request.explicit:
        attempts.append(Attempt(request.version, AttemptKind.REQUESTED_RETRY))
    attempts.extend(
        Attempt(normalize_version(version), AttemptKind.RECENT_RELEASE)
        for version in recent
    )
    return attempts


class FallbackResolver:
    """
    Resolves, downloads and caches a tool version.

    All collaborators are passed in explicitly.

    Example:
        >>> resolver = FallbackResolver(
        ...     releases=GitHubReleaseClient(),
        ...     locator=ArtifactLocator(HttpArchiveFetcher(), detect_platform()),
        ...     cache=ToolCache(),
        ... )
        >>> result = resolver.resolve("latest")
        >>> print(f"{result.version} installed to {result.path}")
    """

    def __init__(
        self,
        releases: ReleaseDirectory,
        locator: ArtifactLocator,
        cache: CacheStore,
        tool_name: str = TOOL_NAME,
        fallback_count: int = DEFAULT_RECENT_COUNT,
        log: Optional[logging.Logger] = None,
    ):
        self.releases = releases
        self.locator = locator
        self.cache = cache
        self.tool_name = tool_name
        self.fallback_count = fallback_count
        self.log = log or logger

    def normalize(self, specifier: Optional[str]) -> VersionRequest:
        """
        Normalize a requested specifier into a concrete version.

        ``latest`` (or nothing) is resolved through the release directory,
        which itself falls back to a fixed version when unavailable.

        Raises:
            ConfigError: If the specifier leaves no version once normalized
        """
        if is_latest(specifier):
            request = VersionRequest(
                LATEST, normalize_version(self.releases.get_latest_release())
            )
        else:
            request = VersionRequest(specifier.strip(), normalize_version(specifier))

        if not request.version:
            raise ConfigError(f"Invalid {self.tool_name} version: {request.specifier!r}")
        return request

    def resolve(self, specifier: Optional[str]) -> InstallResult:
        """
        Resolve ``specifier`` to an installed, cached tool.

        Raises:
            ConfigError: If the requested version is empty once normalized
            ExhaustedCandidatesError: If every attempted version failed
        """
        request = self.normalize(specifier)

        cached = self.cache.find(self.tool_name, request.version)
        if cached is not None:
            self.log.info(f"Found {self.tool_name} v{request.version} in cache: {cached}")
            return InstallResult(
                path=cached,
                version=request.version,
                requested=request.specifier,
                from_cache=True,
            )

        results: List[AttemptResult] = []

        success = self._run(primary_plan(request), results)
        if success is None:
            self.log.warning(
                f"Failed to download {self.tool_name} v{request.version}, "
                "trying fallback versions"
            )
            recent = self.releases.get_recent_releases(self.fallback_count)
            success = self._run(fallback_plan(request, recent), results)

        if success is None:
            raise ExhaustedCandidatesError(
                self.tool_name, [result.attempt.version for result in results]
            )

        version = success.attempt.version
        path = self.cache.save(success.path, self.tool_name, version)
        self.log.info(f"Successfully downloaded {self.tool_name} v{version}")
        return InstallResult(
            path=path,
            version=version,
            requested=request.specifier,
            attempts=results,
        )

    def _run(
        self, attempts: Sequence[Attempt], results: List[AttemptResult]
    ) -> Optional[AttemptResult]:
        """
        Run attempts strictly in order until one succeeds.

        Every outcome is appended to ``results``.

        Returns:
            The successful result, or None if all attempts failed
        """
        for attempt in attempts:
            result = self._attempt(attempt)
            results.append(result)
            if result.succeeded:
                return result
            if attempt.kind is not AttemptKind.PRIMARY:
                self.log.warning(
                    f"Failed to download {self.tool_name} v{attempt.version}, "
                    "trying next version"
                )
        return None

    def _attempt(self, attempt: Attempt) -> AttemptResult:
        self.log.info(f"Attempting to download {self.tool_name} v{attempt.version}")
        try:
            path = self.locator.download_and_extract(attempt.version)
        except ArtifactDownloadError as e:
            return AttemptResult(attempt, error=e.reason)
        return AttemptResult(attempt, path=path)


__all__ = [
    "LATEST",
    "normalize_version",
    "is_latest",
    "VersionRequest",
    "AttemptKind",
    "Attempt",
    "AttemptResult",
    "InstallResult",
    "primary_plan",
    "fallback_plan",
    "FallbackResolver",
]
