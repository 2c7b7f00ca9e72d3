"""
Pytest configuration and shared fixtures for DprintKit tests.
"""

import io
import zipfile
from pathlib import Path
from typing import List, Optional

import pytest

from dprintkit.core.platform import PlatformInfo, clear_platform_cache
from dprintkit.release.index import DownloadedFileType, Release, ReleaseAsset


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _reset_platform_cache():
    """Platform detection is cached per process; isolate tests from each other."""
    clear_platform_cache()
    yield
    clear_platform_cache()


@pytest.fixture
def linux_x64() -> PlatformInfo:
    return PlatformInfo("linux", "x86_64")


@pytest.fixture
def windows_x64() -> PlatformInfo:
    return PlatformInfo("windows", "x86_64")


@pytest.fixture
def cache_root(tmp_path) -> Path:
    root = tmp_path / "cache"
    root.mkdir()
    return root


def make_zip_bytes(files: dict) -> bytes:
    """Build an in-memory zip archive from {name: content}."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, content in files.items():
            info = zipfile.ZipInfo(name)
            info.external_attr = 0o755 << 16
            zf.writestr(info, content)
    return buffer.getvalue()


@pytest.fixture
def dprint_zip() -> bytes:
    return make_zip_bytes({"dprint": b"#!/bin/sh\necho dprint\n"})


def make_release(version: str, asset_names: List[str]) -> Release:
    return Release(
        version=version,
        assets=[
            ReleaseAsset(
                name=name,
                download_url=f"https://github.com/dprint/dprint/releases/download/{version}/{name}",
            )
            for name in asset_names
        ],
    )


class FakeReleaseClient:
    """
    In-memory release index.

    Records every call; download() materializes a directory holding the
    binary named `binary_name` as the real client would after extraction.
    """

    def __init__(
        self,
        release: Optional[Release] = None,
        platform: Optional[PlatformInfo] = None,
        binary_name: str = "dprint",
        error: Optional[Exception] = None,
    ):
        self.release = release
        self.platform = platform or PlatformInfo("linux", "x86_64")
        self.binary_name = binary_name
        self.error = error
        self.latest_release_calls = []
        self.download_calls = []

    def current_platform(self) -> PlatformInfo:
        return self.platform

    def latest_release(self, repo, require_assets=True, pre_release=False):
        self.latest_release_calls.append((repo, require_assets, pre_release))
        if self.error is not None:
            raise self.error
        return self.release

    def download(self, url, destination, file_type=DownloadedFileType.ZIP):
        self.download_calls.append((url, Path(destination), file_type))
        destination = Path(destination)
        destination.mkdir(parents=True)
        (destination / self.binary_name).write_text("binary")
        return destination


@pytest.fixture
def release_050() -> Release:
    return make_release(
        "0.50.0",
        [
            "dprint-x86_64-unknown-linux-gnu.zip",
            "dprint-aarch64-apple-darwin.zip",
            "dprint-x86_64-pc-windows-msvc.zip",
        ],
    )


@pytest.fixture
def fake_client(release_050, linux_x64) -> FakeReleaseClient:
    return FakeReleaseClient(release=release_050, platform=linux_x64)


@pytest.fixture
def zip_factory():
    return make_zip_bytes


@pytest.fixture
def release_factory():
    return make_release


@pytest.fixture
def client_factory():
    return FakeReleaseClient
