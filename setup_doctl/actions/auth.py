"""
Authentication of the installed doctl binary.
"""

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Optional

from setup_doctl.core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


def find_executable(install_dir: Path, name: str = "doctl") -> Optional[Path]:
    """
    Locate the tool binary inside an installation directory.

    Release archives hold the binary at the top level; nested layouts are
    searched as well.
    """
    exe_name = f"{name}.exe" if os.name == "nt" else name
    install_dir = Path(install_dir)

    candidate = install_dir / exe_name
    if candidate.is_file():
        return candidate

    for path in install_dir.rglob(exe_name):
        if path.is_file():
            return path

    found = shutil.which(name)
    return Path(found) if found else None


def authenticate(install_dir: Path, token: str, timeout: int = 120):
    """
    Run ``doctl auth init -t <token>``.

    Raises:
        AuthenticationError: If the binary is missing or the command fails
    """
    executable = find_executable(install_dir)
    if executable is None:
        raise AuthenticationError(f"doctl executable not found in {install_dir}")

    logger.debug(f"Running {executable} auth init")
    try:
        result = subprocess.run(
            [str(executable), "auth", "init", "-t", token],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise AuthenticationError(f"doctl auth init timed out after {timeout}s") from e
    except OSError as e:
        raise AuthenticationError(f"Failed to run doctl: {e}") from e

    if result.returncode != 0:
        detail = (result.stderr or result.stdout).strip()
        raise AuthenticationError(
            f"doctl auth init failed with exit code {result.returncode}: {detail}"
        )

    logger.info(">>> Successfully logged into doctl")


__all__ = ["find_executable", "authenticate"]
