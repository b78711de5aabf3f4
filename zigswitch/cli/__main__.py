"""
Entry point for running zigswitch CLI as a module.

Usage: python -m zigswitch.cli [VERSION] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
