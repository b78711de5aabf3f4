"""
Checksum-gated toolchain download and extraction.

A version is (re)installed only when its recorded checksum is missing or
differs from the release index. The workflow is:

1. Compare recorded checksum against the index (and check the install exists)
2. Download the archive into a temporary directory under the root
3. Verify the size and the checksum computed while downloading
4. Extract, strip the archive's top-level directory, move into installs/
5. Record the verified checksum
6. Remove the temporary directory (on every path, including failures)

The checksum record is written last. A crash during extraction therefore
leaves no record, and the next run re-downloads.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from zigswitch.core.download import DEFAULT_TIMEOUT, DownloadProgress, download_file
from zigswitch.core.exceptions import ChecksumMismatchError, NetworkError
from zigswitch.core.filesystem import (
    check_archive_support,
    extract_archive,
    replace_directory,
    strip_single_root,
    temporary_directory,
)
from zigswitch.core.verification import checksums_match, normalize_checksum
from zigswitch.toolchain.manifest import ReleaseArtifact
from zigswitch.toolchain.store import InstallStore

logger = logging.getLogger(__name__)


def archive_suffix(platform: str) -> str:
    """Archive type the release index publishes for a platform key."""
    return ".zip" if platform.endswith("-windows") else ".tar.xz"


@dataclass
class FetchResult:
    """Result of ensure_installed."""

    version: str
    """Resolved version identifier"""

    install_dir: Path
    """Path to installed toolchain directory"""

    downloaded: bool
    """False when the existing install was already up to date"""

    download_time: float = 0.0
    """Time spent downloading in seconds"""

    extraction_time: float = 0.0
    """Time spent extracting in seconds"""


class ToolchainFetcher:
    """
    Downloads and installs toolchain archives when their checksum changed.

    Example:
        >>> fetcher = ToolchainFetcher(store)
        >>> result = fetcher.ensure_installed("0.11.0", artifact)
        >>> result.downloaded
        True
    """

    def __init__(
        self,
        store: InstallStore,
        timeout: int = DEFAULT_TIMEOUT,
        progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    ):
        self.store = store
        self.timeout = timeout
        self.progress_callback = progress_callback

    def is_up_to_date(self, version: str, expected_checksum: str) -> bool:
        """
        True if version's recorded checksum matches expected_checksum and its
        install directory is still there.

        A record without an install directory counts as stale, so a removed
        install is downloaded again instead of being reported as present.
        """
        if not self.store.install_dir(version).is_dir():
            return False
        return checksums_match(self.store.get_recorded_checksum(version), expected_checksum)

    def check_prerequisites(self, platform: str) -> None:
        """
        Fail before any network access if archives for platform can't be
        extracted by this interpreter.

        Raises:
            PrerequisiteError: If the needed compression module is missing
        """
        check_archive_support(f"zig{archive_suffix(platform)}")

    def ensure_installed(self, version: str, artifact: ReleaseArtifact) -> FetchResult:
        """
        Install version unless its recorded checksum already matches.

        Args:
            version: Resolved version identifier
            artifact: Release index entry for version on this platform

        Returns:
            FetchResult describing what happened

        Raises:
            NetworkError: If the download fails
            ChecksumMismatchError: If the archive doesn't match the index
            ArchiveError: If extraction fails
        """
        install_dir = self.store.install_dir(version)

        if self.is_up_to_date(version, artifact.shasum):
            logger.debug(f"Recorded checksum for {version} matches the release index")
            return FetchResult(version=version, install_dir=install_dir, downloaded=False)

        return self._download_and_install(version, artifact, install_dir)

    def _download_and_install(
        self, version: str, artifact: ReleaseArtifact, install_dir: Path
    ) -> FetchResult:
        layout = self.store.layout
        check_archive_support(artifact.filename)

        with temporary_directory(prefix=f".tmp-{version}-", dir=layout.root) as tmp:
            archive_path = tmp / artifact.filename

            download_start = time.time()
            result = download_file(
                artifact.tarball,
                archive_path,
                progress_callback=self.progress_callback,
                timeout=self.timeout,
            )
            download_time = time.time() - download_start

            if artifact.size is not None and result.size != artifact.size:
                raise NetworkError(
                    f"Incomplete download of {artifact.filename}: "
                    f"got {result.size} bytes, expected {artifact.size}"
                )

            if not checksums_match(result.checksum, artifact.shasum):
                raise ChecksumMismatchError(
                    artifact.filename, normalize_checksum(artifact.shasum), result.checksum
                )
            logger.info(f"Checksum verified: {result.checksum}")

            extraction_start = time.time()
            staging = tmp / "extract"
            extract_archive(archive_path, staging)
            replace_directory(strip_single_root(staging), install_dir)
            extraction_time = time.time() - extraction_start

            self.store.set_recorded_checksum(version, result.checksum)

        logger.debug(
            f"Installed {version} to {install_dir} "
            f"(download {download_time:.1f}s, extract {extraction_time:.1f}s)"
        )
        return FetchResult(
            version=version,
            install_dir=install_dir,
            downloaded=True,
            download_time=download_time,
            extraction_time=extraction_time,
        )
