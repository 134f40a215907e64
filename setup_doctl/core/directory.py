"""
Directory locations for setup-doctl.

Directory Structure:
    Tool cache ($RUNNER_TOOL_CACHE or ~/.setup-doctl/tool-cache):
        - <tool>/<version>/<arch>/ : Extracted tool installations
        - registry.json            : Index of cached installations
        - lock/                    : Lock files guarding the index

    Work directory ($RUNNER_TEMP or the system temp dir):
        - setup-doctl/<id>/        : Per-attempt download and extraction area
"""

import os
import tempfile
from pathlib import Path

from setup_doctl.core.exceptions import ConfigError


def get_home_dir() -> Path:
    """
    Get the platform-specific setup-doctl home directory.

    Returns:
        Path: ``%USERPROFILE%\\.setup-doctl`` on Windows, ``~/.setup-doctl``
        elsewhere.
    """
    if os.name == "nt":
        user_profile = os.environ.get("USERPROFILE")
        if not user_profile:
            raise ConfigError(
                "USERPROFILE environment variable is not set. "
                "Cannot determine home directory."
            )
        return Path(user_profile) / ".setup-doctl"
    return Path.home() / ".setup-doctl"


def get_tool_cache_dir() -> Path:
    """
    Get the tool cache root.

    The Actions runner exports ``RUNNER_TOOL_CACHE``; outside a runner the
    cache lives under the setup-doctl home directory.

    Example:
        >>> get_tool_cache_dir()
        PosixPath('/opt/hostedtoolcache')  # on a hosted runner
    """
    runner_cache = os.environ.get("RUNNER_TOOL_CACHE")
    if runner_cache:
        return Path(runner_cache)
    return get_home_dir() / "tool-cache"


def get_work_dir() -> Path:
    """Get the scratch directory used for downloads and extraction."""
    runner_temp = os.environ.get("RUNNER_TEMP")
    base = Path(runner_temp) if runner_temp else Path(tempfile.gettempdir())
    return base / "setup-doctl"


__all__ = [
    "get_home_dir",
    "get_tool_cache_dir",
    "get_work_dir",
]
