"""
Filesystem utilities: archive extraction, atomic writes and safe removal.
"""

import logging
import os
import shutil
import sys
import tarfile
import tempfile
import zipfile
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, Union

from zigswitch.core.exceptions import ArchiveError, PrerequisiteError, ZigSwitchError

logger = logging.getLogger(__name__)


class FilesystemError(ZigSwitchError):
    """Raised when a filesystem operation fails."""

    pass


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """Check whether path lies inside parent."""
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


# ============================================================================
# Archive Extraction
# ============================================================================

_TAR_MODES = {
    ".tar.xz": "r:xz",
    ".tar.gz": "r:gz",
    ".tgz": "r:gz",
    ".tar.bz2": "r:bz2",
    ".tar": "r:",
}


def check_archive_support(archive_name: str) -> None:
    """
    Make sure this interpreter can decompress the given archive type.

    Raises:
        PrerequisiteError: If the needed compression module is missing
    """
    name = archive_name.lower()
    module = None
    if name.endswith(".tar.xz"):
        module = "lzma"
    elif name.endswith((".tar.gz", ".tgz", ".zip")):
        module = "zlib"
    elif name.endswith(".tar.bz2"):
        module = "bz2"

    if module is None:
        return
    try:
        __import__(module)
    except ImportError as e:
        raise PrerequisiteError(
            f"Python was built without the '{module}' module, "
            f"cannot extract {archive_name}"
        ) from e


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Reject archive members that would land outside destination.

    Raises:
        ArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()
    if not is_relative_to(member_path, destination.resolve()):
        raise ArchiveError(
            f"Archive member '{path}' attempts directory traversal, extraction blocked"
        )


def extract_archive(archive_path: Path, destination: Path) -> None:
    """
    Extract a .tar.* or .zip archive into destination.

    Raises:
        ArchiveError: If the format is unknown, the archive is corrupt or unsafe
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ArchiveError(f"Archive not found: {archive_path}")

    destination.mkdir(parents=True, exist_ok=True)
    name = archive_path.name.lower()
    check_archive_support(name)

    try:
        if name.endswith(".zip"):
            _extract_zip(archive_path, destination)
            return
        for suffix, mode in _TAR_MODES.items():
            if name.endswith(suffix):
                _extract_tar(archive_path, destination, mode)
                return
    except ArchiveError:
        raise
    except (tarfile.TarError, zipfile.BadZipFile, OSError, EOFError) as e:
        raise ArchiveError(f"Failed to extract {archive_path.name}: {e}") from e

    raise ArchiveError(
        f"Unsupported archive format: {archive_path.name}. "
        "Supported: .tar.xz, .tar.gz, .tar.bz2, .tar, .zip"
    )


def _extract_zip(archive_path: Path, destination: Path) -> None:
    with zipfile.ZipFile(archive_path, "r") as zf:
        members = zf.namelist()
        for member in members:
            _validate_archive_path(member, destination)
        zf.extractall(destination)


def _extract_tar(archive_path: Path, destination: Path, mode: str) -> None:
    with tarfile.open(archive_path, mode) as tar:
        for member in tar.getmembers():
            _validate_archive_path(member.name, destination)

        # Python 3.12+ filter also rejects absolute links and device files
        if sys.version_info >= (3, 12):
            tar.extractall(destination, filter="data")
        else:
            tar.extractall(destination)


def strip_single_root(extract_dir: Path) -> Path:
    """
    Return the directory holding the archive's real content.

    Release archives wrap everything in one top-level folder
    (zig-linux-x86_64-0.11.0/). If that is the case, that folder is returned,
    otherwise extract_dir itself.
    """
    items = list(extract_dir.iterdir())
    if len(items) == 1 and items[0].is_dir() and not items[0].is_symlink():
        return items[0]
    return extract_dir


# ============================================================================
# Safe File Operations
# ============================================================================


def atomic_write(file_path: Union[str, Path], content: Union[str, bytes], encoding: str = "utf-8") -> None:
    """
    Write file atomically using temp file + rename.

    Example:
        >>> atomic_write('hashes/0.11.0', 'abc123')
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    # Temp file in the same directory keeps the rename on one filesystem
    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        if isinstance(content, str):
            with open(temp_fd, "w", encoding=encoding) as f:
                f.write(content)
        else:
            with open(temp_fd, "wb") as f:
                f.write(content)

        temp_path.replace(file_path)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise


def safe_rmtree(path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None) -> None:
    """
    Remove a directory tree, refusing to touch anything outside require_prefix.

    Raises:
        ValueError: If path is not under require_prefix
        FilesystemError: If deletion fails
    """
    path = Path(path).absolute()

    if require_prefix is not None:
        prefix = Path(require_prefix).resolve()
        # Resolve the parent only so a symlink is judged by where it lives
        if not is_relative_to(path.parent.resolve() / path.name, prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{prefix}'"
            )

    if path.is_symlink():
        path.unlink()
        return

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    try:
        shutil.rmtree(path)
    except OSError as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e


def replace_directory(source: Path, target: Path) -> None:
    """
    Move source to target, removing whatever target held before.

    Raises:
        FilesystemError: If the move fails
    """
    if target.exists() or target.is_symlink():
        safe_rmtree(target, require_prefix=target.parent)

    target.parent.mkdir(parents=True, exist_ok=True)
    try:
        os.replace(source, target)
    except OSError:
        # Cross-device: fall back to a copying move
        try:
            shutil.move(str(source), str(target))
        except (OSError, shutil.Error) as e:
            raise FilesystemError(f"Failed to move {source} to {target}: {e}") from e


# ============================================================================
# Temporary File/Directory Management
# ============================================================================


@contextmanager
def temporary_directory(prefix: str = "zigswitch_", dir: Optional[Path] = None):
    """
    Context manager for temporary directory with automatic cleanup.

    The directory is removed on every exit path, including errors.

    Example:
        >>> with temporary_directory(dir=root) as tmp:
        ...     (tmp / 'file.txt').write_text('test')
    """
    if dir is not None:
        Path(dir).mkdir(parents=True, exist_ok=True)
    temp_dir = Path(tempfile.mkdtemp(prefix=prefix, dir=dir))

    try:
        yield temp_dir
    finally:
        if temp_dir.exists():
            try:
                safe_rmtree(temp_dir)
            except FilesystemError as e:
                logger.warning(f"Failed to remove temporary directory: {e}")


__all__ = [
    "FilesystemError",
    "is_relative_to",
    "check_archive_support",
    "extract_archive",
    "strip_single_root",
    "atomic_write",
    "safe_rmtree",
    "replace_directory",
    "temporary_directory",
]
