"""
Use command implementation.

Resolves the requested version, installs it if its checksum changed and
makes it the active toolchain.
"""

import logging

from zigswitch.cli.utils import make_progress_printer
from zigswitch.config import Settings
from zigswitch.core.locking import root_lock
from zigswitch.toolchain.fetcher import ToolchainFetcher
from zigswitch.toolchain.manifest import ReleaseIndexClient
from zigswitch.toolchain.profile import ProfileEditor
from zigswitch.toolchain.store import InstallStore
from zigswitch.toolchain.versions import resolve_version

logger = logging.getLogger(__name__)


def run(args, settings: Settings) -> int:
    """
    Run the use command.

    Args:
        args: Parsed command-line arguments
        settings: Resolved configuration

    Returns:
        Exit code (0 for success)

    Raises:
        InvalidVersionError: If the version token is not recognized
        ZigSwitchError: On any failure that should abort the run
    """
    layout = settings.layout
    store = InstallStore(layout)

    # Invalid tokens and missing prerequisites are rejected before anything
    # touches the disk or network
    version = resolve_version(args.token, store.get_active_version())
    logger.debug(f"Resolved version: {version}")

    progress = None if args.quiet else make_progress_printer()
    fetcher = ToolchainFetcher(store, timeout=settings.timeout, progress_callback=progress)
    fetcher.check_prerequisites(settings.platform)

    layout.ensure()
    with root_lock(layout.lock_file):
        client = ReleaseIndexClient(
            settings.index_url, layout.index_file, timeout=settings.timeout
        )
        artifact = client.fetch().lookup(version, settings.platform)
        result = fetcher.ensure_installed(version, artifact)

        if result.downloaded:
            print(f"Installed Zig {version} to {result.install_dir}")
        else:
            print(f"Zig {version} is already present and up to date")

        if store.switch_to(version):
            print(f"Switched to Zig {version}")

    if not args.no_profile:
        editor = ProfileEditor(settings.profile, layout.active_link)
        if args.yes:
            editor.prompt = lambda question: True
        editor.ensure_path()

    return 0
