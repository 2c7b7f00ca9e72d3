"""
Core functionality for DprintKit.

This package contains the foundational modules that other components depend on.
"""

from .platform import (
    PlatformInfo,
    detect_platform,
    clear_platform_cache,
)

from .locking import (
    LockManager,
    LockTimeout,
)

from .interfaces import (
    BinarySource,
    InstallationStatus,
    InstallationStatusObserver,
)

from .exceptions import (
    DprintKitError,
    InstallerError,
    UnsupportedPlatformError,
    UnsupportedArchitectureError,
    ReleaseIndexError,
    AssetNotFoundError,
    DownloadError,
    CacheError,
    ManifestReadError,
    SettingsError,
)

__all__ = [
    "PlatformInfo",
    "detect_platform",
    "clear_platform_cache",
    "LockManager",
    "LockTimeout",
    "BinarySource",
    "InstallationStatus",
    "InstallationStatusObserver",
    "DprintKitError",
    "InstallerError",
    "UnsupportedPlatformError",
    "UnsupportedArchitectureError",
    "ReleaseIndexError",
    "AssetNotFoundError",
    "DownloadError",
    "CacheError",
    "ManifestReadError",
    "SettingsError",
]
