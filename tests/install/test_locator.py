"""
Tests for release asset URL construction and archive download.
"""

import logging

import pytest

from setup_doctl.core.exceptions import ArtifactDownloadError
from setup_doctl.core.platform import PlatformTarget
from setup_doctl.install.locator import (
    BASE_DOWNLOAD_URL,
    ArtifactLocator,
    build_download_url,
    map_architecture,
    map_platform,
)


class TestPlatformMapping:
    """Test host identifier mapping."""

    @pytest.mark.parametrize(
        "host, expected",
        [("darwin", "darwin"), ("win32", "windows"), ("linux", "linux")],
    )
    def test_known_platforms(self, host, expected):
        assert map_platform(host) == (expected, False)

    @pytest.mark.parametrize(
        "host, expected",
        [("arm64", "arm64"), ("x64", "amd64"), ("ia32", "386")],
    )
    def test_known_architectures(self, host, expected):
        assert map_architecture(host) == (expected, False)

    def test_unknown_platform_defaults_to_linux(self):
        assert map_platform("sunos") == ("linux", True)

    def test_unknown_architecture_defaults_to_amd64(self):
        assert map_architecture("riscv64") == ("amd64", True)


class TestBuildDownloadUrl:
    """Test the pure URL builder."""

    def test_windows_x64(self):
        location = build_download_url("1.98.1", PlatformTarget("win32", "x64"))

        assert location.url == (
            "https://github.com/digitalocean/doctl/releases/download/"
            "v1.98.1/doctl-1.98.1-windows-amd64.zip"
        )
        assert location.extension == "zip"
        assert location.archive_name == "doctl-1.98.1-windows-amd64.zip"
        assert location.warnings == ()

    def test_linux_arm64_is_tarball(self):
        location = build_download_url("1.100.0", PlatformTarget("linux", "arm64"))

        assert location.url.endswith("/v1.100.0/doctl-1.100.0-linux-arm64.tar.gz")
        assert location.extension == "tar.gz"

    def test_darwin_x64(self):
        location = build_download_url("1.100.0", PlatformTarget("darwin", "x64"))

        assert location.archive_name == "doctl-1.100.0-darwin-amd64.tar.gz"

    def test_unknown_platform_and_arch_reported_as_warnings(self):
        location = build_download_url("1.0.0", PlatformTarget("aix", "ppc64"))

        assert location.archive_name == "doctl-1.0.0-linux-amd64.tar.gz"
        assert location.warnings == (
            "unknown platform: aix; defaulting to linux",
            "unknown architecture: ppc64; defaulting to amd64",
        )

    def test_deterministic(self):
        target = PlatformTarget("linux", "x64")
        assert build_download_url("1.2.3", target) == build_download_url("1.2.3", target)

    def test_custom_base_url(self):
        location = build_download_url(
            "1.0.0", PlatformTarget("linux", "x64"), base_url="https://mirror.test/dl/"
        )

        assert location.url == "https://mirror.test/dl/v1.0.0/doctl-1.0.0-linux-amd64.tar.gz"


class TestArtifactLocator:
    """Test downloads through a fetcher."""

    def test_download_returns_extracted_dir(self, fetcher, linux_x64):
        fetcher.good_versions = {"1.98.1"}
        locator = ArtifactLocator(fetcher, linux_x64)

        path = locator.download_and_extract("1.98.1")

        assert (path / "doctl").read_text() == "doctl 1.98.1"
        assert fetcher.urls == [f"{BASE_DOWNLOAD_URL}/v1.98.1/doctl-1.98.1-linux-amd64.tar.gz"]

    def test_failure_wrapped_in_artifact_download_error(self, fetcher, linux_x64, caplog):
        locator = ArtifactLocator(fetcher, linux_x64)

        with caplog.at_level(logging.WARNING):
            with pytest.raises(ArtifactDownloadError) as exc_info:
                locator.download_and_extract("1.0.0")

        assert exc_info.value.version == "1.0.0"
        assert "HTTP 404" in exc_info.value.reason
        assert "Failed to download doctl v1.0.0" in caplog.text

    def test_substitution_warnings_logged(self, fetcher, caplog):
        fetcher.good_versions = {"1.0.0"}
        locator = ArtifactLocator(fetcher, PlatformTarget("plan9", "x64"))

        with caplog.at_level(logging.WARNING):
            locator.download_and_extract("1.0.0")

        assert "unknown platform: plan9; defaulting to linux" in caplog.text

    def test_uses_given_logger(self, fetcher, linux_x64, test_logger, caplog):
        locator = ArtifactLocator(fetcher, linux_x64, log=test_logger)

        with caplog.at_level(logging.WARNING, logger=test_logger.name):
            with pytest.raises(ArtifactDownloadError):
                locator.download_and_extract("2.0.0")

        assert [r.name for r in caplog.records] == [test_logger.name]
