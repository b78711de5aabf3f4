"""
Install store: checksum records, install directories and the active link.

All state lives under one root directory, passed in as a RootLayout:

    hashes/<version>      checksum verified when <version> was installed
    installs/<version>/   extracted archive
    current -> installs/<version>
"""

import logging
from pathlib import Path
from typing import List, Optional

from zigswitch.core.directory import RootLayout
from zigswitch.core.filesystem import atomic_write
from zigswitch.core.verification import normalize_checksum
from zigswitch.toolchain.linking import ToolchainLinkManager
from zigswitch.toolchain.versions import version_sort_key

logger = logging.getLogger(__name__)


class InstallStore:
    """
    Repository over the on-disk install state.

    Example:
        >>> store = InstallStore(RootLayout(Path("~/.zigswitch").expanduser()))
        >>> store.get_active_version()
        '0.11.0'
    """

    def __init__(self, layout: RootLayout, link_manager: Optional[ToolchainLinkManager] = None):
        self.layout = layout
        self.link_manager = link_manager or ToolchainLinkManager()

    def install_dir(self, version: str) -> Path:
        return self.layout.install_dir(version)

    def get_active_version(self) -> Optional[str]:
        """
        Version the active link points to.

        Returns:
            Basename of the link target, or None if the link is absent or broken
        """
        link = self.layout.active_link
        if not self.link_manager.is_valid_link(link):
            if self.link_manager.is_broken_link(link):
                logger.debug(f"Active link is broken: {link}")
            return None
        return self.link_manager.resolve_link(link).name

    def get_recorded_checksum(self, version: str) -> Optional[str]:
        """Checksum recorded when version was installed, or None."""
        hash_file = self.layout.hash_file(version)
        try:
            value = normalize_checksum(hash_file.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        return value or None

    def set_recorded_checksum(self, version: str, checksum: str) -> None:
        """Record the verified checksum for version, replacing any previous one."""
        atomic_write(self.layout.hash_file(version), normalize_checksum(checksum))
        logger.debug(f"Recorded checksum for {version}")

    def switch_to(self, version: str) -> bool:
        """
        Point the active link at version's install directory.

        Returns:
            True if the link changed, False if it already pointed there
        """
        if self.get_active_version() == version:
            return False

        self.link_manager.repoint(self.layout.active_link, self.install_dir(version))
        return True

    def installed_versions(self) -> List[str]:
        """Versions with both an install directory and a checksum record."""
        if not self.layout.installs_dir.is_dir():
            return []
        versions = [
            path.name
            for path in self.layout.installs_dir.iterdir()
            if path.is_dir() and self.layout.hash_file(path.name).is_file()
        ]
        return sorted(versions, key=version_sort_key)
