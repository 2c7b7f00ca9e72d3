"""
Filesystem helpers for the release cache.

Release archives are unpacked into a staging directory, binaries are
marked executable, and cache entries are removed with a guard that keeps
deletions inside the cache root.
"""

import os
import shutil
import stat
import sys
import tarfile
import zipfile
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from .exceptions import DprintKitError

IS_WINDOWS = os.name == "nt"

ProgressCallback = Callable[[int, int], None]


# ============================================================================
# Errors
# ============================================================================


class FilesystemError(DprintKitError):
    """A filesystem operation on the cache failed."""

    pass


class ArchiveExtractionError(FilesystemError):
    """A release archive could not be unpacked."""

    pass


class UnsupportedArchiveFormat(ArchiveExtractionError):
    """The archive extension is neither zip nor gzipped tar."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """An archive member would land outside the extraction directory."""

    pass


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """True if `path` lies under `parent` (both taken as given)."""
    try:
        path.relative_to(parent)
    except ValueError:
        return False
    return True


def _check_members(names: Iterable[str], destination: Path) -> None:
    root = destination.resolve()
    for name in names:
        target = (root / name).resolve()
        if not is_relative_to(target, root):
            raise InsecureArchiveError(
                f"Refusing to extract {name!r}: it resolves outside {root}"
            )


def _check_tar_links(members: Iterable[tarfile.TarInfo], destination: Path) -> None:
    # Older interpreters have no extraction filter, so links are checked here
    root = destination.resolve()
    for member in members:
        if member.isdev():
            raise InsecureArchiveError(
                f"Refusing to extract {member.name!r}: device files are not allowed"
            )
        if member.issym():
            target = (root / member.name).parent / member.linkname
        elif member.islnk():
            target = root / member.linkname
        else:
            continue
        if not is_relative_to(target.resolve(), root):
            raise InsecureArchiveError(
                f"Refusing to extract {member.name!r}: link to {member.linkname!r} "
                f"resolves outside {root}"
            )


# ============================================================================
# Archive Extraction
# ============================================================================


def extract_archive(
    archive_path: Union[str, Path],
    destination: Union[str, Path],
    progress_callback: Optional[ProgressCallback] = None,
) -> None:
    """
    Unpack a release archive into `destination`.

    The format is chosen by extension: `.zip`, `.tar.gz` or `.tgz`.
    Every member path is checked before anything is written.

    Args:
        archive_path: Archive on disk
        destination: Directory to unpack into (created if missing)
        progress_callback: Optional callback(done, total) per member

    Raises:
        UnsupportedArchiveFormat: Unknown extension
        InsecureArchiveError: A member escapes the destination
        ArchiveExtractionError: The archive is missing or corrupt
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.is_file():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    name = archive_path.name.lower()
    if name.endswith(".zip"):
        unpack = _unpack_zip
    elif name.endswith((".tar.gz", ".tgz")):
        unpack = _unpack_tar_gz
    else:
        raise UnsupportedArchiveFormat(
            f"Cannot unpack {archive_path.name}: expected .zip or .tar.gz"
        )

    destination.mkdir(parents=True, exist_ok=True)
    try:
        unpack(archive_path, destination, progress_callback)
    except ArchiveExtractionError:
        raise
    except (OSError, zipfile.BadZipFile, tarfile.TarError, EOFError) as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e


def _unpack_zip(
    archive_path: Path, destination: Path, progress_callback: Optional[ProgressCallback]
) -> None:
    # zipfile drops permission bits, so restore them from the unix attributes
    with zipfile.ZipFile(archive_path) as zf:
        members = zf.infolist()
        _check_members((m.filename for m in members), destination)

        for done, member in enumerate(members, start=1):
            written = Path(zf.extract(member, destination))
            unix_mode = (member.external_attr >> 16) & 0o777
            if unix_mode and not IS_WINDOWS and written.is_file():
                written.chmod(unix_mode)
            if progress_callback:
                progress_callback(done, len(members))


def _unpack_tar_gz(
    archive_path: Path, destination: Path, progress_callback: Optional[ProgressCallback]
) -> None:
    with tarfile.open(archive_path, "r:gz") as tar:
        members = tar.getmembers()
        _check_members((m.name for m in members), destination)
        _check_tar_links(members, destination)

        if sys.version_info >= (3, 12):
            tar.extractall(destination, filter="data")
        else:
            tar.extractall(destination)

        if progress_callback:
            progress_callback(len(members), len(members))


# ============================================================================
# Permissions and Removal
# ============================================================================


def make_executable(path: Union[str, Path]) -> None:
    """Grant execute permission wherever read permission exists. No-op on Windows."""
    if IS_WINDOWS:
        return
    path = Path(path)
    mode = path.stat().st_mode
    if mode & stat.S_IRUSR:
        mode |= stat.S_IXUSR
    if mode & stat.S_IRGRP:
        mode |= stat.S_IXGRP
    if mode & stat.S_IROTH:
        mode |= stat.S_IXOTH
    path.chmod(mode)


def _clear_readonly(func, path, _exc_info):
    # Windows refuses to delete read-only files
    os.chmod(path, stat.S_IWRITE)
    func(path)


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Delete a directory tree, optionally only if it lies under `require_prefix`.

    A missing directory is not an error.

    Raises:
        ValueError: `path` is outside `require_prefix`
        FilesystemError: `path` is not a directory, or removal failed
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        prefix = Path(require_prefix).resolve()
        if not is_relative_to(path, prefix):
            raise ValueError(f"Refusing to delete {path}: it is outside {prefix}")

    if not path.exists():
        return
    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    try:
        if IS_WINDOWS:
            shutil.rmtree(path, onerror=_clear_readonly)
        else:
            shutil.rmtree(path)
    except OSError as e:
        raise FilesystemError(f"Could not delete {path}: {e}") from e


def safe_unlink(path: Union[str, Path]) -> None:
    """
    Delete a single file or symlink. A missing file is not an error.

    Raises:
        FilesystemError: If removal fails
    """
    try:
        Path(path).unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        raise FilesystemError(f"Could not delete {path}: {e}") from e


__all__ = [
    "FilesystemError",
    "ArchiveExtractionError",
    "UnsupportedArchiveFormat",
    "InsecureArchiveError",
    "is_relative_to",
    "extract_archive",
    "make_executable",
    "safe_rmtree",
    "safe_unlink",
]
