"""
setup-doctl CLI module.

This module provides the command-line interface for setup-doctl.
"""

from .parser import CLI, main

__all__ = ["CLI", "main"]
