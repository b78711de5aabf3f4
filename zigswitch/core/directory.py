"""
Directory structure management for zigswitch.

Directory Structure (~/.zigswitch/ or $ZIGSWITCH_ROOT):
    - hashes/       : One file per installed version, content = verified checksum
    - installs/     : One directory per installed version (extracted archive)
    - current       : Symlink to the active install directory
    - index.json    : Last fetched release index (scratch, overwritten each run)
    - config.yaml   : Optional user configuration
    - .lock         : Lock file guarding concurrent runs
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from zigswitch.core.exceptions import ZigSwitchError

ROOT_ENV_VAR = "ZIGSWITCH_ROOT"


class DirectoryError(ZigSwitchError):
    """Raised when the root directory cannot be prepared."""

    pass


def get_root_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    """
    Get the zigswitch root directory.

    Args:
        environ: Environment mapping (defaults to os.environ)

    Returns:
        $ZIGSWITCH_ROOT if set and non-empty, else ~/.zigswitch

    Example:
        >>> get_root_dir({"ZIGSWITCH_ROOT": "/opt/zig"})
        PosixPath('/opt/zig')
    """
    environ = os.environ if environ is None else environ
    override = environ.get(ROOT_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".zigswitch"


@dataclass(frozen=True)
class RootLayout:
    """Paths of everything zigswitch keeps under its root directory."""

    root: Path

    @property
    def hashes_dir(self) -> Path:
        return self.root / "hashes"

    @property
    def installs_dir(self) -> Path:
        return self.root / "installs"

    @property
    def active_link(self) -> Path:
        return self.root / "current"

    @property
    def index_file(self) -> Path:
        return self.root / "index.json"

    @property
    def config_file(self) -> Path:
        return self.root / "config.yaml"

    @property
    def lock_file(self) -> Path:
        return self.root / ".lock"

    def hash_file(self, version: str) -> Path:
        return self.hashes_dir / version

    def install_dir(self, version: str) -> Path:
        return self.installs_dir / version

    def ensure(self) -> "RootLayout":
        """
        Create the root, hashes/ and installs/ directories if missing.

        Raises:
            DirectoryError: If a directory cannot be created
        """
        for path in (self.root, self.hashes_dir, self.installs_dir):
            try:
                path.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise DirectoryError(f"Failed to create directory {path}: {e}") from e
        return self
