"""
Archive download and extraction.

This module provides the download-and-extract collaborator used by the
artifact locator:
- Streaming HTTP/HTTPS downloads with TLS verification
- Timeout handling
- Extraction of the downloaded archive into a per-attempt work directory

No retries happen here; retry policy belongs to the fallback resolver.
"""

import logging
import tempfile
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import requests
from requests.exceptions import RequestException

from setup_doctl.core.directory import get_work_dir
from setup_doctl.core.filesystem import extract_archive, safe_rmtree
from setup_doctl.core.interfaces import ArchiveFetcher

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192
DEFAULT_TIMEOUT = 60


class DownloadError(Exception):
    """Exception raised when a download fails."""

    pass


def download_file(url: str, destination: Path, timeout: int = DEFAULT_TIMEOUT) -> Path:
    """
    Download file from URL to destination.

    Args:
        url: URL to download from
        destination: Local path to save file
        timeout: Connect and read timeout in seconds

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: If the request fails or returns an error status
        ValueError: If URL or destination is invalid

    Example:
        >>> download_file(
        ...     "https://github.com/digitalocean/doctl/releases/download/v1.98.1/doctl-1.98.1-linux-amd64.tar.gz",
        ...     Path("/tmp/doctl.tar.gz"),
        ... )
    """
    if not url:
        raise ValueError("URL cannot be empty")

    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    logger.info(f"Downloading from {url}")

    try:
        with requests.get(
            url, stream=True, timeout=timeout, allow_redirects=True
        ) as response:
            response.raise_for_status()

            with open(destination, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)

    except RequestException as e:
        destination.unlink(missing_ok=True)
        raise DownloadError(f"Failed to download {url}: {e}") from e

    logger.debug(f"Download complete: {destination}")
    return destination


class HttpArchiveFetcher(ArchiveFetcher):
    """
    Downloads an archive over HTTP and extracts it.

    Every call works in a fresh subdirectory of ``work_dir`` so that a failed
    attempt never leaves files behind for the next candidate.

    Example:
        >>> fetcher = HttpArchiveFetcher(timeout=30)
        >>> extracted = fetcher.fetch_and_unpack(url)
    """

    def __init__(self, work_dir: Optional[Path] = None, timeout: int = DEFAULT_TIMEOUT):
        """
        Initialize fetcher.

        Args:
            work_dir: Scratch directory (default: $RUNNER_TEMP/setup-doctl)
            timeout: Per-request timeout in seconds
        """
        self.work_dir = Path(work_dir) if work_dir else get_work_dir()
        self.timeout = timeout

    def fetch_and_unpack(self, url: str) -> Path:
        """
        Download ``url`` and extract it.

        Returns:
            Path to the extracted directory

        Raises:
            DownloadError: On HTTP errors, timeouts and connection failures
            ArchiveExtractionError: If the archive is corrupt or unsupported
        """
        self.work_dir.mkdir(parents=True, exist_ok=True)
        attempt_dir = Path(tempfile.mkdtemp(prefix="attempt-", dir=self.work_dir))

        archive_name = Path(urlparse(url).path).name or "archive"
        archive_path = attempt_dir / archive_name
        extract_dir = attempt_dir / "extracted"

        try:
            download_file(url, archive_path, timeout=self.timeout)
            extract_archive(archive_path, extract_dir)
        except Exception:
            safe_rmtree(attempt_dir, require_prefix=self.work_dir)
            raise

        archive_path.unlink(missing_ok=True)
        logger.debug(f"Extracted {archive_name} to {extract_dir}")
        return extract_dir


__all__ = [
    "DownloadError",
    "download_file",
    "HttpArchiveFetcher",
]
