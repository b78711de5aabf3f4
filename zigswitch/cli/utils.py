"""
Shared utilities for CLI commands.
"""

import sys
from typing import Callable, Optional

from zigswitch.core.download import DownloadProgress


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)


def make_progress_printer(stream=None) -> Optional[Callable[[DownloadProgress], None]]:
    """
    Build a progress callback that redraws one line on a terminal.

    Returns None when stream is not a TTY, so redirected output stays clean.
    """
    stream = stream or sys.stderr
    if not stream.isatty():
        return None

    def on_progress(progress: DownloadProgress):
        stream.write(f"\r  {progress}\033[K")
        if progress.percentage >= 100:
            stream.write("\n")
        stream.flush()

    return on_progress
