"""
Platform detection for DprintKit.

This module detects the current operating system and CPU architecture so
the installer can pick the right release archive.

Usage:
    from dprintkit.core.platform import detect_platform

    platform_info = detect_platform()
    print(f"OS: {platform_info.os}")
    print(f"Architecture: {platform_info.arch}")
"""

import functools
import platform
from dataclasses import dataclass

from .exceptions import UnsupportedPlatformError

OS_LINUX = "linux"
OS_MACOS = "macos"
OS_WINDOWS = "windows"

ARCH_X86_64 = "x86_64"
ARCH_AARCH64 = "aarch64"
ARCH_X86 = "x86"


@dataclass(frozen=True)
class PlatformInfo:
    """
    Host platform identity.

    Attributes:
        os: Operating system ('linux', 'macos', 'windows')
        arch: CPU architecture ('x86_64', 'aarch64', 'x86')
    """

    os: str
    arch: str

    def platform_string(self) -> str:
        """
        Get canonical platform string.

        Example:
            >>> PlatformInfo('linux', 'x86_64').platform_string()
            'linux-x86_64'
        """
        return f"{self.os}-{self.arch}"

    @property
    def is_windows(self) -> bool:
        return self.os == OS_WINDOWS

    def __str__(self) -> str:
        return self.platform_string()


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect current platform information.

    This function is cached - it only runs detection once per process.

    Returns:
        PlatformInfo instance with detected platform information

    Raises:
        UnsupportedPlatformError: If the operating system is not supported
    """
    return PlatformInfo(os=_detect_os(), arch=_detect_architecture())


def _detect_os() -> str:
    """
    Detect operating system.

    Returns:
        Normalized OS name: 'windows', 'linux', 'macos'

    Raises:
        UnsupportedPlatformError: If OS is not supported
    """
    system = platform.system().lower()

    if system == "windows":
        return OS_WINDOWS
    elif system == "linux":
        return OS_LINUX
    elif system == "darwin":
        return OS_MACOS
    else:
        raise UnsupportedPlatformError(f"Unsupported operating system: {system}")


def _detect_architecture() -> str:
    """
    Detect CPU architecture.

    Returns:
        Normalized architecture: 'x86_64', 'aarch64', 'x86', or the raw
        machine string for anything else
    """
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return ARCH_X86_64
    elif machine in ("aarch64", "arm64"):
        return ARCH_AARCH64
    elif machine in ("i386", "i686", "x86"):
        return ARCH_X86
    else:
        # Rejected later when an asset name is requested
        return machine


def clear_platform_cache():
    """
    Clear the platform detection cache.

    This forces the next call to detect_platform() to re-detect.
    """
    detect_platform.cache_clear()


__all__ = [
    "PlatformInfo",
    "detect_platform",
    "clear_platform_cache",
    "OS_LINUX",
    "OS_MACOS",
    "OS_WINDOWS",
    "ARCH_X86_64",
    "ARCH_AARCH64",
    "ARCH_X86",
]
