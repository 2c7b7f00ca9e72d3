"""
Versioned release cache.

The cache root holds at most one extracted release, in a directory named
`{prefix}{version}`. Every entry carrying the prefix is removed before a
new version is installed, so installs always start from a clean slate.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

from ..core.exceptions import CacheError
from ..core.filesystem import FilesystemError, safe_rmtree, safe_unlink
from ..core.platform import PlatformInfo
from .assets import AutoInstallerConfig

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """A prefixed entry of the cache root."""

    name: str
    path: Path
    version: str
    is_dir: bool


class VersionedCacheManager:
    """Owns the layout of one cache root."""

    def __init__(
        self, cache_root: Path, config: AutoInstallerConfig, platform: PlatformInfo
    ):
        """
        Args:
            cache_root: Directory holding versioned releases
            config: Installer configuration (prefix, binary name)
            platform: Platform the binaries are installed for
        """
        self.cache_root = Path(cache_root)
        self.config = config
        self.platform = platform

    def binary_path(self, version: str) -> Path:
        """Absolute path the binary of `version` occupies once installed."""
        return self.cache_root / self.config.binary_path(version, self.platform.os)

    def release_dir(self, version: str) -> Path:
        return self.cache_root / self.config.release_folder(version)

    def is_version_installed(self, version: str) -> bool:
        """True if the binary of `version` exists as a regular file."""
        return self.binary_path(version).is_file()

    def list_entries(self) -> List[CacheEntry]:
        """
        List prefixed entries of the cache root, sorted by name.

        Raises:
            CacheError: If the cache root cannot be listed
        """
        prefix = self.config.release_folder_prefix
        entries = []
        for dir_entry in self._scan():
            if not dir_entry.name.startswith(prefix):
                continue
            entries.append(
                CacheEntry(
                    name=dir_entry.name,
                    path=Path(dir_entry.path),
                    version=dir_entry.name[len(prefix) :],
                    is_dir=dir_entry.is_dir(follow_symlinks=False),
                )
            )
        return sorted(entries, key=lambda e: e.name)

    def installed_versions(self) -> List[str]:
        """Versions whose binary is present in the cache."""
        return [
            entry.version
            for entry in self.list_entries()
            if entry.is_dir and self.is_version_installed(entry.version)
        ]

    def purge_other_versions(self) -> List[Path]:
        """
        Remove every prefixed entry from the cache root.

        This includes a directory for the version about to be installed,
        which may be left over from an interrupted install. Removal stops
        at the first failure.

        Returns:
            Paths that were removed

        Raises:
            CacheError: If listing, stat or removal fails
        """
        prefix = self.config.release_folder_prefix
        removed = []

        for dir_entry in self._scan():
            if not dir_entry.name.startswith(prefix):
                continue

            entry_path = Path(dir_entry.path)
            try:
                is_dir = dir_entry.is_dir(follow_symlinks=False)
            except OSError as e:
                raise CacheError(f"Failed to stat {entry_path}: {e}", entry_path) from e

            try:
                if is_dir:
                    safe_rmtree(entry_path, require_prefix=self.cache_root)
                else:
                    safe_unlink(entry_path)
            except (FilesystemError, ValueError) as e:
                kind = "directory" if is_dir else "file"
                raise CacheError(
                    f"Failed to remove {kind} {entry_path}: {e}", entry_path
                ) from e

            logger.info(f"Removed cached release {entry_path}")
            removed.append(entry_path)

        return removed

    def _scan(self) -> List[os.DirEntry]:
        if not self.cache_root.exists():
            return []
        try:
            with os.scandir(self.cache_root) as it:
                return list(it)
        except OSError as e:
            raise CacheError(
                f"Failed to list cache directory {self.cache_root}: {e}",
                self.cache_root,
            ) from e


__all__ = ["CacheEntry", "VersionedCacheManager"]
