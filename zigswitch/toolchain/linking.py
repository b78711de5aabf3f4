"""
Symlink management for the active toolchain pointer.

The active version is a single symlink whose target is one install directory.
Repointing goes through a temporary sibling link and os.replace, so the
pointer is never observed missing or half-written.
"""

import logging
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class ToolchainLinkManager:
    """Manages the symlink selecting the active toolchain."""

    def resolve_link(self, link_path: Path) -> Optional[Path]:
        """
        Resolve link to absolute target path.

        Args:
            link_path: Path to link

        Returns:
            Absolute path to link target, or None if not a link
        """
        if not link_path.is_symlink():
            return None

        target = Path(os.readlink(link_path))
        if not target.is_absolute():
            target = link_path.parent / target
        return Path(os.path.normpath(target))

    def is_valid_link(self, link_path: Path) -> bool:
        """True if link exists and points to an existing directory."""
        target = self.resolve_link(link_path)
        return target is not None and target.is_dir()

    def is_broken_link(self, link_path: Path) -> bool:
        """True if path is a symlink whose target is gone."""
        return link_path.is_symlink() and not self.is_valid_link(link_path)

    def repoint(self, link_path: Path, target_path: Path) -> None:
        """
        Atomically point link_path at target_path.

        Raises:
            FileNotFoundError: If target doesn't exist
            IsADirectoryError: If link_path is a real directory
            OSError: If link creation fails
        """
        target_path = target_path.absolute()
        if not target_path.is_dir():
            raise FileNotFoundError(f"Target does not exist: {target_path}")

        if link_path.is_dir() and not link_path.is_symlink():
            raise IsADirectoryError(
                f"{link_path} is a directory, refusing to replace it with a link"
            )

        link_path.parent.mkdir(parents=True, exist_ok=True)
        temp_link = link_path.with_name(f".{link_path.name}.tmp")
        if temp_link.is_symlink() or temp_link.exists():
            temp_link.unlink()

        os.symlink(target_path, temp_link, target_is_directory=True)
        try:
            os.replace(temp_link, link_path)
        except OSError:
            temp_link.unlink(missing_ok=True)
            raise

        logger.debug(f"Linked {link_path} -> {target_path}")
