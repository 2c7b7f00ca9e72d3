"""
Concurrent access control for the release cache.

Two processes resolving the same cache root could otherwise interleave a
purge with another process's download. The installer therefore holds a
file lock around the purge+download critical section.

Usage:
    from dprintkit.core.locking import LockManager

    lock_manager = LockManager(cache_root)
    with lock_manager.install_lock(timeout=300):
        # Safely purge and install
        pass
"""

import logging
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock, Timeout as LockTimeout

logger = logging.getLogger(__name__)

# Must not start with the release folder prefix, or a purge would delete it
INSTALL_LOCK_NAME = ".dprintkit-install.lock"


class LockManager:
    """
    Manages the install lock for one cache root.

    Uses file-based locking with the `filelock` library for cross-platform
    compatibility and automatic cleanup on process death.

    Attributes:
        lock_dir: Directory where the lock file is stored
    """

    def __init__(self, lock_dir: Path):
        self.lock_dir = Path(lock_dir)

    @property
    def install_lock_path(self) -> Path:
        return self.lock_dir / INSTALL_LOCK_NAME

    @contextmanager
    def install_lock(self, timeout: int = 300):
        """
        Acquire the install lock for the cache root.

        Args:
            timeout: Maximum wait time in seconds (default: 300 for long downloads)

        Yields:
            None

        Raises:
            LockTimeout: If lock can't be acquired within timeout
        """
        self.lock_dir.mkdir(parents=True, exist_ok=True)
        lock_path = self.install_lock_path
        lock = FileLock(lock_path, timeout=timeout)

        try:
            with lock:
                logger.debug(f"Acquired install lock: {lock_path}")
                yield
                logger.debug(f"Released install lock: {lock_path}")
        except LockTimeout as e:
            logger.error(
                f"Could not acquire install lock after {timeout}s. "
                "Another process may be installing dprint."
            )
            raise LockTimeout(str(lock_path)) from e


__all__ = ["LockManager", "LockTimeout", "INSTALL_LOCK_NAME"]
