"""
zigswitch - install Zig releases and switch the active version.

Release archives are fetched from the Zig release index, verified against
their SHA-256 checksum and extracted under ~/.zigswitch/installs/. A single
symlink, ~/.zigswitch/current, selects the active version.
"""

__version__ = "0.1.0"
