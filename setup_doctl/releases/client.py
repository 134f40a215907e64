"""
GitHub release directory client.

Queries the GitHub REST API for the newest release of a repository and for
its most recent releases. GitHub rate-limits anonymous API calls by IP address
and hosted runners share addresses, so a failed query never aborts the job:
the client logs a warning and substitutes a known-good fallback version.
"""

import logging
import os
from typing import Any, Dict, List, Optional

import requests
from requests.exceptions import RequestException

from setup_doctl.core.interfaces import ReleaseDirectory

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
DEFAULT_OWNER = "digitalocean"
DEFAULT_REPO = "doctl"
FALLBACK_VERSION = "1.98.1"
DEFAULT_RECENT_COUNT = 5


class MalformedReleaseResponse(ValueError):
    """The release API answered with data that has no usable release name."""

    pass


def _release_name(release: Any) -> str:
    """
    Extract the display name of a release, falling back to its tag.

    Raises:
        MalformedReleaseResponse: If neither field is a non-empty string
    """
    if not isinstance(release, dict):
        raise MalformedReleaseResponse(f"Unexpected release payload: {release!r}")

    for field in ("name", "tag_name"):
        value = release.get(field)
        if isinstance(value, str) and value.strip():
            return value.strip()

    raise MalformedReleaseResponse("Release has neither a name nor a tag_name")


class GitHubReleaseClient(ReleaseDirectory):
    """
    Release directory backed by the GitHub REST API.

    Example:
        >>> client = GitHubReleaseClient()
        >>> client.get_latest_release()
        '1.101.0'
        >>> client.get_recent_releases(3)
        ['1.101.0', '1.100.0', '1.99.0']
    """

    def __init__(
        self,
        owner: str = DEFAULT_OWNER,
        repo: str = DEFAULT_REPO,
        token: Optional[str] = None,
        fallback_version: str = FALLBACK_VERSION,
        api_url: str = GITHUB_API_URL,
        timeout: int = 30,
    ):
        """
        Initialize client.

        Args:
            owner: Repository owner
            repo: Repository name
            token: Optional GitHub token (default: $GITHUB_TOKEN)
            fallback_version: Version substituted when the API is unavailable
            api_url: GitHub API base URL
            timeout: Request timeout in seconds
        """
        self.owner = owner
        self.repo = repo
        self.token = token or os.environ.get("GITHUB_TOKEN")
        self.fallback_version = fallback_version
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    @property
    def releases_url(self) -> str:
        return f"{self.api_url}/repos/{self.owner}/{self.repo}/releases"

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/vnd.github+json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        logger.debug(f"Fetching release info from: {url}")
        response = requests.get(
            url, headers=self._headers(), params=params, timeout=self.timeout
        )
        response.raise_for_status()
        return response.json()

    def get_latest_release(self) -> str:
        """
        Get the newest release name.

        Returns:
            Release name, or the fallback version if the query fails
        """
        try:
            return _release_name(self._get_json(f"{self.releases_url}/latest"))
        except (RequestException, ValueError) as e:
            logger.warning(
                f"{e}\n\n"
                f"Failed to retrieve latest version; falling back to: {self.fallback_version}"
            )
            return self.fallback_version

    def get_recent_releases(self, count: int = DEFAULT_RECENT_COUNT) -> List[str]:
        """
        Get the ``count`` most recent release names, newest first.

        Returns:
            Release names in API order, or ``[fallback_version]`` if the query fails
        """
        try:
            data = self._get_json(self.releases_url, params={"per_page": count})
            if not isinstance(data, list) or not data:
                raise MalformedReleaseResponse("Release list is empty")
            return [_release_name(release) for release in data[:count]]
        except (RequestException, ValueError) as e:
            logger.warning(f"Failed to fetch recent releases: {e}")
            return [self.fallback_version]


__all__ = [
    "FALLBACK_VERSION",
    "DEFAULT_RECENT_COUNT",
    "GitHubReleaseClient",
    "MalformedReleaseResponse",
]
