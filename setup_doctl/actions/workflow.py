"""
GitHub Actions runtime adapter.

Implements the runner primitives the installer needs: reading inputs,
masking secrets, extending PATH, writing outputs, failing the job, and a
logging handler that turns log records into workflow commands so warnings
and errors are annotated in the Actions UI.
"""

import logging
import os
import sys
import uuid
from pathlib import Path
from typing import Dict, Mapping, Optional, TextIO

from setup_doctl.core.exceptions import MissingInputError

logger = logging.getLogger(__name__)


def escape_data(value: str) -> str:
    """Escape a workflow command message."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def format_command(command: str, message: str) -> str:
    """
    Format a workflow command line.

    Example:
        >>> format_command("warning", "rate limited")
        '::warning::rate limited'
    """
    return f"::{command}::{escape_data(message)}"


class WorkflowCommandHandler(logging.Handler):
    """
    Logging handler emitting workflow commands on stdout.

    DEBUG records become ``::debug::``, WARNING ``::warning::``, ERROR and
    above ``::error::``; INFO is printed as plain text.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord):
        try:
            message = self.format(record)
            if record.levelno >= logging.ERROR:
                line = format_command("error", message)
            elif record.levelno >= logging.WARNING:
                line = format_command("warning", message)
            elif record.levelno >= logging.INFO:
                line = message
            else:
                line = format_command("debug", message)
            stream = self.stream or sys.stdout
            stream.write(line + "\n")
            stream.flush()
        except Exception:
            self.handleError(record)


class ActionsContext:
    """
    Access to the Actions runner environment.

    Outside a runner (no ``GITHUB_PATH``/``GITHUB_OUTPUT``) path and output
    updates only affect the current process and the log.

    Example:
        >>> ctx = ActionsContext()
        >>> version = ctx.get_input("version") or "latest"
        >>> ctx.set_secret(ctx.get_input("token", required=True))
    """

    def __init__(
        self,
        environ: Optional[Mapping[str, str]] = None,
        stream: Optional[TextIO] = None,
    ):
        """
        Initialize context.

        Args:
            environ: Environment mapping (default: os.environ)
            stream: Where workflow commands are written (default: stdout)
        """
        self.environ = environ if environ is not None else os.environ
        self.stream = stream
        self.failed = False
        self.outputs: Dict[str, str] = {}

    def _write(self, line: str):
        stream = self.stream or sys.stdout
        stream.write(line + "\n")
        stream.flush()

    def get_input(self, name: str, required: bool = False) -> str:
        """
        Read an action input from ``INPUT_<NAME>``.

        Raises:
            MissingInputError: If required and empty
        """
        key = f"INPUT_{name.replace(' ', '_').upper()}"
        value = self.environ.get(key, "").strip()
        if required and not value:
            raise MissingInputError(name)
        return value

    def set_secret(self, value: str):
        """Mask ``value`` in all subsequent log output."""
        if value:
            self._write(format_command("add-mask", value))

    def add_path(self, path: Path):
        """Prepend ``path`` to PATH for this process and later steps."""
        path_str = str(path)
        github_path = self.environ.get("GITHUB_PATH")
        if github_path:
            with open(github_path, "a", encoding="utf-8") as f:
                f.write(path_str + "\n")
        os.environ["PATH"] = os.pathsep.join([path_str, os.environ.get("PATH", "")])
        logger.debug(f"Added to PATH: {path_str}")

    def set_output(self, name: str, value: str):
        """Set a step output."""
        self.outputs[name] = value
        github_output = self.environ.get("GITHUB_OUTPUT")
        if not github_output:
            logger.debug(f"Output {name}={value}")
            return

        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        with open(github_output, "a", encoding="utf-8") as f:
            f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")

    def set_failed(self, message: str):
        """Report a fatal error; the caller exits non-zero."""
        self.failed = True
        self._write(format_command("error", message))


__all__ = [
    "escape_data",
    "format_command",
    "WorkflowCommandHandler",
    "ActionsContext",
]
