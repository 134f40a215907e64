"""
File system utilities for setup-doctl.

This module provides the file operations the installer needs:
- Archive extraction (tar.gz, zip) with directory traversal protection
- Atomic writes for the cache index
- Safe deletion and recursive copy of extracted installations
"""

import os
import shutil
import tarfile
import tempfile
import zipfile
from pathlib import Path
from typing import Union

IS_WINDOWS = os.name == "nt"


# ============================================================================
# Exceptions
# ============================================================================


class FilesystemError(Exception):
    """Base exception for filesystem operations."""

    pass


class ArchiveExtractionError(FilesystemError):
    """Failed to extract an archive."""

    pass


class UnsupportedArchiveFormat(ArchiveExtractionError):
    """Archive format is not supported."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not member_path.is_relative_to(destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def archive_format(name: str) -> str:
    """
    Detect archive format from a file name or URL.

    Returns:
        'zip' or 'tar.gz'

    Raises:
        UnsupportedArchiveFormat: If the name has no supported extension
    """
    lowered = name.lower()
    if lowered.endswith(".zip"):
        return "zip"
    if lowered.endswith((".tar.gz", ".tgz")):
        return "tar.gz"
    raise UnsupportedArchiveFormat(
        f"Unsupported archive format: {name}. Supported: .zip, .tar.gz"
    )


def extract_archive(archive_path: Union[str, Path], destination: Union[str, Path]) -> Path:
    """
    Extract an archive to a destination directory.

    The format is detected from the file name. All member paths are validated
    before anything is written.

    Returns:
        The destination directory

    Raises:
        UnsupportedArchiveFormat: If archive format is not recognized
        InsecureArchiveError: If archive contains malicious paths
        ArchiveExtractionError: If the archive is missing or corrupt

    Example:
        >>> extract_archive('doctl-1.98.1-linux-amd64.tar.gz', '/tmp/doctl')
        PosixPath('/tmp/doctl')
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    fmt = archive_format(archive_path.name)
    destination.mkdir(parents=True, exist_ok=True)

    try:
        if fmt == "zip":
            _extract_zip(archive_path, destination)
        else:
            _extract_tar_gz(archive_path, destination)
    except ArchiveExtractionError:
        raise
    except (tarfile.TarError, zipfile.BadZipFile, EOFError, OSError) as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e

    return destination


def _extract_zip(archive_path: Path, destination: Path) -> None:
    """Extract a ZIP archive."""
    with zipfile.ZipFile(archive_path, "r") as zf:
        members = zf.namelist()
        for member in members:
            _validate_archive_path(member, destination)
        zf.extractall(destination)


def _extract_tar_gz(archive_path: Path, destination: Path) -> None:
    """Extract a .tar.gz archive."""
    with tarfile.open(archive_path, "r:gz") as tar:
        for member in tar.getmembers():
            _validate_archive_path(member.name, destination)

        # The data filter also keeps the executable bit of the binary
        if hasattr(tarfile, "data_filter"):
            tar.extractall(destination, filter="data")
        else:
            tar.extractall(destination)


# ============================================================================
# Safe File Operations
# ============================================================================


def atomic_write(
    file_path: Union[str, Path], content: Union[str, bytes], encoding: str = "utf-8"
) -> None:
    """
    Write file atomically using temp file + rename.

    The file is never observable in a partially-written state.

    Example:
        >>> atomic_write('registry.json', '{"version": 1}')
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    # Same directory keeps the rename on one filesystem
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

    except Exception:
        temp_path.unlink(missing_ok=True)
        raise


def safe_rmtree(
    path: Union[str, Path], require_prefix: Union[str, Path, None] = None
) -> None:
    """
    Safely remove a directory tree.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be under this directory

    Raises:
        ValueError: If path is not under require_prefix
        FilesystemError: If deletion fails
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).resolve()
        if not path.is_relative_to(require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    try:
        if IS_WINDOWS:

            def handle_remove_readonly(func, failed_path, exc):
                """Error handler for Windows read-only files."""
                if not os.access(failed_path, os.W_OK):
                    os.chmod(failed_path, 0o777)
                    func(failed_path)
                else:
                    raise

            shutil.rmtree(path, onerror=handle_remove_readonly)
        else:
            shutil.rmtree(path)

    except OSError as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e


def recursive_copy(source: Union[str, Path], destination: Union[str, Path]) -> None:
    """
    Recursively copy a directory tree, preserving file modes.

    Example:
        >>> recursive_copy('/tmp/setup-doctl/abc/extracted', '/opt/cache/doctl/1.98.1/x64')
    """
    source = Path(source)
    destination = Path(destination)

    if not source.exists():
        raise FilesystemError(f"Source does not exist: {source}")

    if not source.is_dir():
        raise FilesystemError(f"Source is not a directory: {source}")

    destination.mkdir(parents=True, exist_ok=True)

    for item in source.rglob("*"):
        dest_item = destination / item.relative_to(source)

        if item.is_dir():
            dest_item.mkdir(parents=True, exist_ok=True)
        else:
            dest_item.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(item, dest_item)


__all__ = [
    "FilesystemError",
    "ArchiveExtractionError",
    "UnsupportedArchiveFormat",
    "InsecureArchiveError",
    "archive_format",
    "extract_archive",
    "atomic_write",
    "safe_rmtree",
    "recursive_copy",
]
