"""
Entry point for running zigswitch as a module.

Usage: python -m zigswitch [VERSION] [options]
"""

from zigswitch.cli.parser import main

if __name__ == "__main__":
    main()
