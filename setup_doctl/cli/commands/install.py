"""
Install command implementation.

Resolves and caches a doctl release without touching the Actions runtime.
"""

import logging

from setup_doctl.cli.utils import build_resolver, config_from_args, print_error
from setup_doctl.core.exceptions import SetupDoctlError

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the install command.

    Prints the installation directory on stdout so scripts can capture it.

    Returns:
        Exit code (0 for success)
    """
    try:
        config = config_from_args(args)
        result = build_resolver(config).resolve(config.version)
    except SetupDoctlError as e:
        print_error(str(e))
        return 1

    if result.from_cache:
        logger.info(f"doctl v{result.version} already cached")
    elif result.fell_back:
        logger.warning(
            f"Requested {result.requested} could not be installed; "
            f"installed v{result.version} instead"
        )

    logger.info(f"doctl v{result.version} installed to {result.path}")
    print(result.path)
    return 0
