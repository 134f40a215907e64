"""
Run command implementation.

Entry point for the GitHub Action: installs doctl, exposes it to later steps
and authenticates it unless authentication is skipped.
"""

import logging
from typing import Optional

from setup_doctl.actions.auth import authenticate
from setup_doctl.actions.workflow import ActionsContext
from setup_doctl.cli.utils import build_resolver, config_from_args
from setup_doctl.core.exceptions import SetupDoctlError

logger = logging.getLogger(__name__)


def run(args, ctx: Optional[ActionsContext] = None) -> int:
    """
    Run the action.

    Args:
        args: Parsed command-line arguments
        ctx: Actions runtime (default: current process environment)

    Returns:
        Exit code (0 for success, 1 if the job should fail)
    """
    ctx = ctx or ActionsContext()

    try:
        config = config_from_args(args, ctx)
        result = build_resolver(config).resolve(config.version)

        ctx.add_path(result.path)
        ctx.set_output("path", str(result.path))
        ctx.set_output("version", result.version)
        logger.info(f">>> doctl version v{result.version} installed to {result.path}")

        # Workflows such as `doctl app spec validate --schema-only` need no auth
        if config.no_auth:
            logger.info(">>> Skipping doctl auth")
            return 0

        token = config.token or ctx.get_input("token", required=True)
        ctx.set_secret(token)
        authenticate(result.path, token, timeout=config.timeout)
        return 0

    except SetupDoctlError as e:
        ctx.set_failed(str(e))
        return 1
    except (OSError, ValueError) as e:
        logger.debug(f"Unexpected failure: {e}", exc_info=True)
        ctx.set_failed(str(e) or type(e).__name__)
        return 1
