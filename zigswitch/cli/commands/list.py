"""
List commands implementation.

--list shows installed versions, --list-remote shows what the release index
offers for this platform.
"""

import logging

from zigswitch.config import Settings
from zigswitch.toolchain.manifest import ReleaseIndexClient
from zigswitch.toolchain.store import InstallStore
from zigswitch.toolchain.versions import LATEST

logger = logging.getLogger(__name__)


def run(args, settings: Settings) -> int:
    """List installed versions, marking the active one with '*'."""
    store = InstallStore(settings.layout)
    active = store.get_active_version()
    installed = store.installed_versions()

    if not installed:
        print("No versions installed")
        return 0

    for version in installed:
        marker = "*" if version == active else " "
        print(f"{marker} {version}")
    return 0


def run_remote(args, settings: Settings) -> int:
    """List versions available for this platform, newest first."""
    store = InstallStore(settings.layout)
    installed = set(store.installed_versions())

    client = ReleaseIndexClient(settings.index_url, timeout=settings.timeout)
    manifest = client.fetch()

    available = [LATEST] + manifest.versions()
    shown = 0
    for version in available:
        if settings.platform not in manifest.platforms(version):
            continue
        label = version
        if version == LATEST and manifest.latest_build():
            label = f"{LATEST} ({manifest.latest_build()})"
        suffix = "  [installed]" if version in installed else ""
        print(f"  {label}{suffix}")
        shown += 1

    if not shown:
        print(f"No releases available for {settings.platform}")
    return 0
