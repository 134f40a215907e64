"""
Entry point for running setup-doctl as a module.

Usage: python -m setup_doctl [command] [options]
"""

from setup_doctl.cli.parser import main

if __name__ == "__main__":
    main()
