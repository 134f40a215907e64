"""
Entry point for running the setup-doctl CLI as a module.

Usage: python -m setup_doctl.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
