"""
Network download with progress tracking and streaming checksum computation.

Downloads are never retried: any transport or HTTP error surfaces as a
NetworkError and ends the run.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

from zigswitch.core.exceptions import NetworkError
from zigswitch.core.verification import new_hasher

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30
CHUNK_SIZE = 64 * 1024


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int
    percentage: float
    speed_bps: float  # bytes per second
    eta_seconds: float  # estimated time remaining

    def __str__(self) -> str:
        return format_progress(self)


@dataclass
class DownloadResult:
    """A completed download and the checksum computed while streaming it."""

    path: Path
    checksum: str
    size: int


class StreamingHasher:
    """Compute hash incrementally for streaming downloads."""

    def __init__(self, algorithm: str = "sha256"):
        self.algorithm = algorithm.lower()
        self.hasher = new_hasher(self.algorithm)

    def update(self, data: bytes):
        self.hasher.update(data)

    def finalize(self) -> str:
        """Get final hash value as hex string."""
        return self.hasher.hexdigest()


def fetch_bytes(url: str, timeout: int = DEFAULT_TIMEOUT) -> bytes:
    """
    GET a small document and return its body.

    Raises:
        NetworkError: On any transport failure or non-2xx status
    """
    if not url:
        raise NetworkError("URL cannot be empty")

    logger.debug(f"Fetching {url}")
    try:
        response = requests.get(url, timeout=timeout, allow_redirects=True)
        response.raise_for_status()
    except RequestException as e:
        raise NetworkError(f"Failed to fetch {url}: {e}") from e
    return response.content


def download_file(
    url: str,
    destination: Path,
    algorithm: str = "sha256",
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    timeout: int = DEFAULT_TIMEOUT,
) -> DownloadResult:
    """
    Stream URL to destination, hashing the bytes as they arrive.

    Args:
        url: URL to download from
        destination: Local path to save file
        algorithm: Hash algorithm for the returned checksum
        progress_callback: Optional callback for progress updates
        timeout: Request timeout in seconds

    Returns:
        DownloadResult with the computed checksum

    Raises:
        NetworkError: If the request fails or the stream breaks

    Example:
        >>> result = download_file("https://example.com/zig.tar.xz", Path("/tmp/zig.tar.xz"))
        >>> result.checksum
        'e3b0c442...'
    """
    if not url:
        raise NetworkError("Download URL is empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    logger.info(f"Downloading {url}")
    hasher = StreamingHasher(algorithm)
    downloaded = 0

    try:
        with requests.get(
            url, stream=True, timeout=timeout, allow_redirects=True
        ) as response:
            response.raise_for_status()

            content_length = response.headers.get("content-length")
            total_size = int(content_length) if content_length else 0

            start_time = time.time()
            last_progress_time = start_time

            with open(destination, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if not chunk:
                        continue
                    f.write(chunk)
                    hasher.update(chunk)
                    downloaded += len(chunk)

                    # Report at most twice per second, plus the final chunk
                    current_time = time.time()
                    if progress_callback and (
                        current_time - last_progress_time >= 0.5
                        or downloaded == total_size
                    ):
                        progress_callback(
                            _make_progress(downloaded, total_size, start_time, current_time)
                        )
                        last_progress_time = current_time
    except RequestException as e:
        raise NetworkError(f"Download failed for {url}: {e}") from e

    logger.debug(f"Download complete: {destination} ({downloaded} bytes)")
    return DownloadResult(path=destination, checksum=hasher.finalize(), size=downloaded)


def _make_progress(
    downloaded: int, total_size: int, start_time: float, current_time: float
) -> DownloadProgress:
    elapsed = current_time - start_time
    speed = downloaded / elapsed if elapsed > 0 else 0
    remaining = total_size - downloaded if total_size > 0 else 0
    eta = remaining / speed if speed > 0 else 0

    return DownloadProgress(
        bytes_downloaded=downloaded,
        total_bytes=total_size if total_size > 0 else downloaded,
        percentage=(downloaded / total_size * 100) if total_size > 0 else 0,
        speed_bps=speed,
        eta_seconds=eta,
    )


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Example:
        >>> progress = DownloadProgress(52428800, 104857600, 50.0, 1048576, 50)
        >>> print(format_progress(progress))
        50.0/100.0 MB (50.0%) at 1.0 MB/s ETA: 50s
    """
    mb_downloaded = progress.bytes_downloaded / 1024 / 1024
    mb_total = progress.total_bytes / 1024 / 1024
    speed_mbps = progress.speed_bps / 1024 / 1024

    if progress.percentage > 0:
        return (
            f"{mb_downloaded:.1f}/{mb_total:.1f} MB "
            f"({progress.percentage:.1f}%) "
            f"at {speed_mbps:.1f} MB/s "
            f"ETA: {progress.eta_seconds:.0f}s"
        )
    else:
        # Unknown total size
        return f"{mb_downloaded:.1f} MB at {speed_mbps:.1f} MB/s"
