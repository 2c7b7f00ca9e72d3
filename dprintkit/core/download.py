"""
Network download with progress tracking.

This module streams a single HTTP(S) resource to disk. Downloads are
never resumed or retried: a failed transfer removes the partial file and
raises DownloadError, and the next invocation starts from scratch.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

from .exceptions import DownloadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
PROGRESS_INTERVAL = 0.5  # seconds between progress callbacks

MB = 1024 * 1024


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int
    percentage: float
    speed_bps: float  # bytes per second

    def __str__(self) -> str:
        return format_progress(self)


class _ProgressReporter:
    """Throttles progress callbacks to one per PROGRESS_INTERVAL."""

    def __init__(self, callback: Callable[[DownloadProgress], None], total: int):
        self.callback = callback
        self.total = total
        self.started = time.monotonic()
        self.last_report = self.started

    def update(self, downloaded: int) -> None:
        now = time.monotonic()
        finished = self.total > 0 and downloaded >= self.total
        if not finished and now - self.last_report < PROGRESS_INTERVAL:
            return
        self.last_report = now

        elapsed = now - self.started
        self.callback(
            DownloadProgress(
                bytes_downloaded=downloaded,
                total_bytes=self.total or downloaded,
                percentage=downloaded * 100 / self.total if self.total else 0,
                speed_bps=downloaded / elapsed if elapsed > 0 else 0,
            )
        )


def download_file(
    url: str,
    destination: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    timeout: int = 30,
    session: Optional[requests.Session] = None,
) -> Path:
    """
    Download file from URL to destination.

    Args:
        url: URL to download from
        destination: Local path to save file (parent is created)
        progress_callback: Optional callback for progress updates
        timeout: Connect/read timeout in seconds
        session: Optional requests session (default: module-level requests)

    Returns:
        destination

    Raises:
        DownloadError: If the transfer fails
        ValueError: If URL or destination is empty

    Example:
        >>> url = "https://github.com/dprint/dprint/releases/download/0.50.0/dprint-x86_64-unknown-linux-gnu.zip"
        >>> download_file(url, Path("cache/dprint.zip"))
    """
    if not url:
        raise ValueError("URL cannot be empty")
    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    http = session or requests

    logger.info(f"Downloading {url}")
    written = 0
    try:
        with http.get(url, stream=True, timeout=timeout) as response:
            response.raise_for_status()
            total = int(response.headers.get("content-length") or 0)
            reporter = (
                _ProgressReporter(progress_callback, total) if progress_callback else None
            )

            with open(destination, "wb") as out:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if not chunk:
                        continue
                    out.write(chunk)
                    written += len(chunk)
                    if reporter:
                        reporter.update(written)

    except (RequestException, OSError) as e:
        logger.error(f"Download of {url} failed: {e}")
        destination.unlink(missing_ok=True)
        raise DownloadError(f"Failed to download {url}: {e}") from e

    logger.debug(f"Saved {written} bytes to {destination}")
    return destination


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Example:
        >>> progress = DownloadProgress(52428800, 104857600, 50.0, 1048576)
        >>> print(format_progress(progress))
        50.0/100.0 MB (50.0%) at 1.0 MB/s
    """
    done = progress.bytes_downloaded / MB
    speed = progress.speed_bps / MB

    if progress.total_bytes > 0 and progress.percentage > 0:
        total = progress.total_bytes / MB
        return f"{done:.1f}/{total:.1f} MB ({progress.percentage:.1f}%) at {speed:.1f} MB/s"
    return f"{done:.1f} MB at {speed:.1f} MB/s"
