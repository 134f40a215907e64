"""
Pytest configuration and shared fixtures for setup-doctl tests.
"""

import logging

import pytest

from setup_doctl.core.platform import PlatformTarget, clear_platform_cache
from tests.mocks import FakeCache, FakeFetcher, FakeReleaseDirectory


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if config.getoption("--integration"):
        return
    skip_integration = pytest.mark.skip(reason="need --integration option to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep runner variables and platform detection from leaking between tests."""
    for name in (
        "RUNNER_TOOL_CACHE",
        "RUNNER_TEMP",
        "GITHUB_PATH",
        "GITHUB_OUTPUT",
        "GITHUB_TOKEN",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("RUNNER_TEMP", str(tmp_path / "runner-temp"))
    clear_platform_cache()
    yield
    clear_platform_cache()


@pytest.fixture
def linux_x64() -> PlatformTarget:
    return PlatformTarget("linux", "x64")


@pytest.fixture
def releases() -> FakeReleaseDirectory:
    """Directory whose latest release is 1.101.0."""
    return FakeReleaseDirectory(
        latest="1.101.0", recent=["1.101.0", "1.100.0", "1.99.0"]
    )


@pytest.fixture
def fetcher(tmp_path) -> FakeFetcher:
    """Fetcher that fails for every version until configured."""
    return FakeFetcher(tmp_path / "downloads")


@pytest.fixture
def fake_cache(tmp_path) -> FakeCache:
    return FakeCache(tmp_path / "cache")


@pytest.fixture
def test_logger() -> logging.Logger:
    return logging.getLogger("setup_doctl.tests")
