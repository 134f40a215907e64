"""GitHub Actions runtime integration."""

from .auth import authenticate, find_executable
from .workflow import ActionsContext, WorkflowCommandHandler

__all__ = [
    "ActionsContext",
    "WorkflowCommandHandler",
    "authenticate",
    "find_executable",
]
