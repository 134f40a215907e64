"""
Shared utilities for CLI commands.

Builds configuration from parsed arguments and wires the resolver to its
concrete collaborators.
"""

import logging
import sys
from typing import Any, Dict, Optional

from setup_doctl.actions.workflow import ActionsContext
from setup_doctl.config.settings import SetupConfig, load_config
from setup_doctl.core.cache import ToolCache
from setup_doctl.core.download import HttpArchiveFetcher
from setup_doctl.core.platform import resolve_platform
from setup_doctl.install.locator import ArtifactLocator
from setup_doctl.install.resolver import FallbackResolver
from setup_doctl.releases.client import GitHubReleaseClient

logger = logging.getLogger(__name__)

_ARG_SETTINGS = ("cache_dir", "fallback_count", "timeout", "platform", "arch")


def args_overrides(args) -> Dict[str, Any]:
    """Collect the settings given as command-line flags."""
    overrides = {name: getattr(args, name, None) for name in _ARG_SETTINGS}
    version = getattr(args, "tool_version", None)
    if version:
        overrides["version"] = version
    return overrides


def config_from_args(args, ctx: Optional[ActionsContext] = None) -> SetupConfig:
    """
    Build validated configuration: YAML file, then action inputs, then flags.

    Raises:
        ConfigError: If any source is invalid
    """
    return load_config(
        config_file=getattr(args, "config", None),
        ctx=ctx,
        overrides=args_overrides(args),
    )


def build_resolver(
    config: SetupConfig, log: Optional[logging.Logger] = None
) -> FallbackResolver:
    """
    Create a resolver backed by GitHub, HTTP downloads and the tool cache.

    Example:
        >>> resolver = build_resolver(SetupConfig(version="1.98.1"))
        >>> result = resolver.resolve("1.98.1")
    """
    target = resolve_platform(config.platform, config.arch)
    logger.debug(f"Target platform: {target}")

    releases = GitHubReleaseClient(token=config.github_token, timeout=config.timeout)
    fetcher = HttpArchiveFetcher(timeout=config.timeout)
    locator = ArtifactLocator(fetcher, target, log=log)
    cache = ToolCache(config.cache_dir, target=target)

    return FallbackResolver(
        releases=releases,
        locator=locator,
        cache=cache,
        fallback_count=config.fallback_count,
        log=log,
    )


def print_error(message: str, details: Optional[str] = None):
    """Print error message to stderr in consistent format."""
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)


__all__ = [
    "args_overrides",
    "config_from_args",
    "build_resolver",
    "print_error",
]
