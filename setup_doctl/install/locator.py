"""
Artifact locator for doctl release archives.

Maps a concrete version and a host platform to the release asset URL, and
downloads that asset through an ArchiveFetcher. The mapping functions are
pure: unknown platforms and architectures are replaced by defaults and the
substitution is reported back as data rather than logged.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from setup_doctl.core.exceptions import ArtifactDownloadError
from setup_doctl.core.interfaces import ArchiveFetcher
from setup_doctl.core.platform import PlatformTarget

logger = logging.getLogger(__name__)

TOOL_NAME = "doctl"
BASE_DOWNLOAD_URL = "https://github.com/digitalocean/doctl/releases/download"

DEFAULT_OS = "linux"
DEFAULT_ARCH = "amd64"

_OS_MAP = {
    "darwin": "darwin",
    "win32": "windows",
    "linux": "linux",
}

_ARCH_MAP = {
    "arm64": "arm64",
    "x64": "amd64",
    "ia32": "386",
}


def map_platform(host_platform: str) -> Tuple[str, bool]:
    """
    Map a host platform identifier to the release asset OS name.

    Returns:
        (os_name, substituted) where ``substituted`` is True when the input
        was not recognized and the default was used

    Example:
        >>> map_platform("win32")
        ('windows', False)
        >>> map_platform("sunos")
        ('linux', True)
    """
    if host_platform in _OS_MAP:
        return _OS_MAP[host_platform], False
    return DEFAULT_OS, True


def map_architecture(host_arch: str) -> Tuple[str, bool]:
    """
    Map a host CPU identifier to the release asset architecture name.

    Returns:
        (arch_name, substituted)

    Example:
        >>> map_architecture("ia32")
        ('386', False)
    """
    if host_arch in _ARCH_MAP:
        return _ARCH_MAP[host_arch], False
    return DEFAULT_ARCH, True


@dataclass(frozen=True)
class ArtifactLocation:
    """Where a release archive lives and what format it is in."""

    version: str
    url: str
    os_name: str
    arch: str
    extension: str
    warnings: Tuple[str, ...] = ()

    @property
    def archive_name(self) -> str:
        return self.url.rsplit("/", 1)[-1]


def build_download_url(
    version: str,
    target: PlatformTarget,
    base_url: str = BASE_DOWNLOAD_URL,
    tool_name: str = TOOL_NAME,
) -> ArtifactLocation:
    """
    Build the release asset location for a version and host.

    Pure and deterministic; never raises for unknown platforms.

    Example:
        >>> loc = build_download_url("1.98.1", PlatformTarget("win32", "x64"))
        >>> loc.url
        'https://github.com/digitalocean/doctl/releases/download/v1.98.1/doctl-1.98.1-windows-amd64.zip'
    """
    os_name, os_substituted = map_platform(target.platform)
    arch, arch_substituted = map_architecture(target.arch)
    extension = "zip" if os_name == "windows" else "tar.gz"

    warnings = []
    if os_substituted:
        warnings.append(f"unknown platform: {target.platform}; defaulting to {os_name}")
    if arch_substituted:
        warnings.append(f"unknown architecture: {target.arch}; defaulting to {arch}")

    url = (
        f"{base_url.rstrip('/')}/v{version}/"
        f"{tool_name}-{version}-{os_name}-{arch}.{extension}"
    )
    return ArtifactLocation(
        version=version,
        url=url,
        os_name=os_name,
        arch=arch,
        extension=extension,
        warnings=tuple(warnings),
    )


class ArtifactLocator:
    """
    Downloads release archives for a fixed host target.

    Example:
        >>> locator = ArtifactLocator(HttpArchiveFetcher(), detect_platform())
        >>> extracted = locator.download_and_extract("1.98.1")
    """

    def __init__(
        self,
        fetcher: ArchiveFetcher,
        target: PlatformTarget,
        base_url: str = BASE_DOWNLOAD_URL,
        tool_name: str = TOOL_NAME,
        log: Optional[logging.Logger] = None,
    ):
        self.fetcher = fetcher
        self.target = target
        self.base_url = base_url
        self.tool_name = tool_name
        self.log = log or logger

    def locate(self, version: str) -> ArtifactLocation:
        return build_download_url(
            version, self.target, base_url=self.base_url, tool_name=self.tool_name
        )

    def download_and_extract(self, version: str) -> Path:
        """
        Download and extract the archive for ``version``.

        Returns:
            Path to the extracted directory

        Raises:
            ArtifactDownloadError: If the download or extraction fails for any reason
        """
        location = self.locate(version)
        for message in location.warnings:
            self.log.warning(message)
        self.log.debug(f"{self.tool_name} download url: {location.url}")

        try:
            return self.fetcher.fetch_and_unpack(location.url)
        except Exception as e:
            self.log.warning(f"Failed to download {self.tool_name} v{version}: {e}")
            raise ArtifactDownloadError(version, str(e)) from e


__all__ = [
    "TOOL_NAME",
    "BASE_DOWNLOAD_URL",
    "ArtifactLocation",
    "ArtifactLocator",
    "build_download_url",
    "map_platform",
    "map_architecture",
]
