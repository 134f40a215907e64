"""
Cache command implementation.

Lists doctl installations held in the tool cache.
"""

import logging

from setup_doctl.cli.utils import print_error
from setup_doctl.core.cache import ToolCache
from setup_doctl.core.exceptions import SetupDoctlError
from setup_doctl.core.platform import resolve_platform
from setup_doctl.install.locator import TOOL_NAME

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the cache command.

    Returns:
        Exit code (0 for success)
    """
    target = resolve_platform(args.platform, args.arch)
    cache = ToolCache(args.cache_dir, target=target)

    try:
        versions = cache.list_versions(TOOL_NAME)
    except SetupDoctlError as e:
        print_error(str(e))
        return 1

    if not versions:
        print(f"No cached {TOOL_NAME} versions in {cache.root} ({target})")
        return 0

    for version in versions:
        entry = cache.get_entry(TOOL_NAME, version)
        print(f"{version}\t{entry['path']}\t{entry.get('cached', '')}")
    return 0
