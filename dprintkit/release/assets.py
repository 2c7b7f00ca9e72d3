"""
Release artifact naming.

Maps a platform to the name of the archive published on the release page
and to the path the extracted binary occupies inside the cache root.
Nothing in this module touches the filesystem.
"""

from dataclasses import dataclass
from pathlib import Path

from ..core.exceptions import UnsupportedArchitectureError, UnsupportedPlatformError
from ..core.platform import (
    ARCH_AARCH64,
    ARCH_X86_64,
    OS_LINUX,
    OS_MACOS,
    OS_WINDOWS,
)

_ARCH_TOKENS = {
    ARCH_X86_64: "x86_64",
    ARCH_AARCH64: "aarch64",
}

_OS_TOKENS = {
    OS_LINUX: "unknown-linux-gnu",
    OS_MACOS: "apple-darwin",
    OS_WINDOWS: "pc-windows-msvc",
}


@dataclass(frozen=True)
class AutoInstallerConfig:
    """
    Where releases come from and how they are laid out in the cache.

    Attributes:
        github_repo: "owner/name" coordinate of the release index
        release_folder_prefix: Prefix of every versioned cache entry
        binary_basename: Executable name without platform suffix
    """

    github_repo: str
    release_folder_prefix: str
    binary_basename: str

    def release_folder(self, version: str) -> str:
        """Name of the directory a release is extracted into."""
        return f"{self.release_folder_prefix}{version}"

    def binary_path(self, version: str, os: str) -> Path:
        """
        Path of the binary relative to the cache root.

        Example:
            >>> DPRINT_INSTALLER.binary_path("0.50.0", "windows")
            PosixPath('dprint-0.50.0/dprint.exe')
        """
        file_extension = ".exe" if os == OS_WINDOWS else ""
        return Path(self.release_folder(version)) / (
            f"{self.binary_basename}{file_extension}"
        )

    def asset_name(self, arch: str, os: str) -> str:
        """
        Name of the release archive for a platform.

        Args:
            arch: Normalized architecture ('x86_64', 'aarch64', 'x86')
            os: Normalized OS ('linux', 'macos', 'windows')

        Returns:
            Asset file name, e.g. 'dprint-aarch64-apple-darwin.zip'

        Raises:
            UnsupportedArchitectureError: For x86 and unknown architectures
            UnsupportedPlatformError: For an unknown operating system
        """
        arch_token = _ARCH_TOKENS.get(arch)
        if arch_token is None:
            raise UnsupportedArchitectureError(arch, self.binary_basename)

        os_token = _OS_TOKENS.get(os)
        if os_token is None:
            raise UnsupportedPlatformError(f"Unsupported operating system: {os}")

        return f"{self.binary_basename}-{arch_token}-{os_token}.zip"


DPRINT_INSTALLER = AutoInstallerConfig(
    github_repo="dprint/dprint",
    release_folder_prefix="dprint-",
    binary_basename="dprint",
)


__all__ = ["AutoInstallerConfig", "DPRINT_INSTALLER"]
