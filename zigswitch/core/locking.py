"""
Concurrent access control for zigswitch.

Only one zigswitch process may work on a given root directory at a time:
two runs could otherwise race on the active symlink or on a checksum record.

Usage:
    from zigswitch.core.locking import root_lock

    with root_lock(layout.lock_file):
        ...
"""

import logging
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock, Timeout as LockTimeout

from zigswitch.core.exceptions import LockError

logger = logging.getLogger(__name__)


@contextmanager
def root_lock(lock_path: Path, timeout: float = 0):
    """
    Acquire the root directory lock.

    Args:
        lock_path: Path of the lock file
        timeout: Seconds to wait; 0 fails immediately when the lock is held

    Raises:
        LockError: If lock can't be acquired within timeout
    """
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    lock = FileLock(str(lock_path), timeout=timeout)

    try:
        with lock:
            logger.debug(f"Acquired root lock: {lock_path}")
            yield
            logger.debug(f"Released root lock: {lock_path}")
    except LockTimeout as e:
        raise LockError(
            f"Could not acquire lock {lock_path}. "
            "Another zigswitch process may be running."
        ) from e
