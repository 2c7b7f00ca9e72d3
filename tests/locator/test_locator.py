"""
Tests for BinaryLocator end-to-end resolution.
"""

import json
import os
from unittest.mock import patch

import pytest

from dprintkit.core.exceptions import AssetNotFoundError, ReleaseIndexError
from dprintkit.core.interfaces import InstallationStatus
from dprintkit.core.platform import PlatformInfo
from dprintkit.locator.locator import DEFAULT_ARGUMENTS, BinaryLocator, LaunchCommand
from dprintkit.locator.settings import BinarySettings, Settings
from dprintkit.locator.sources import ChainedBinarySource
from dprintkit.locator.worktree import Worktree
from dprintkit.release.installer import CallbackStatusObserver


@pytest.fixture
def project(tmp_path):
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def empty_path_worktree(project):
    """Worktree whose search path finds nothing."""
    return Worktree(project, path_env="")


def make_locator(worktree, cache_root, client, settings=None, observer=None):
    return BinaryLocator(
        worktree,
        settings or Settings(),
        cache_root,
        client=client,
        observer=observer,
    )


class TestPrecedence:
    def test_explicit_path_wins(self, project, cache_root, fake_client):
        (project / "package.json").write_text(json.dumps({"dependencies": {"dprint": "1"}}))
        settings = Settings(binary=BinarySettings(path="/custom/dprint"))
        locator = make_locator(Worktree(project), cache_root, fake_client, settings)

        assert locator.binary_path() == "/custom/dprint"
        assert fake_client.latest_release_calls == []

    def test_empty_explicit_path_is_not_skipped(self, project, cache_root, fake_client):
        settings = Settings(binary=BinarySettings(path=""))
        locator = make_locator(
            Worktree(project, path_env=""), cache_root, fake_client, settings
        )

        assert locator.binary_path() == ""
        assert fake_client.latest_release_calls == []

    def test_manifest_before_search_path(self, project, cache_root, fake_client):
        (project / "package.json").write_text(
            json.dumps({"devDependencies": {"dprint": "^0.50.0"}})
        )
        worktree = Worktree(project)
        locator = make_locator(worktree, cache_root, fake_client)

        with patch.object(worktree, "which") as which:
            path = locator.binary_path()

        assert path == str(project.resolve() / "node_modules" / ".bin" / "dprint")
        which.assert_not_called()
        assert fake_client.latest_release_calls == []

    def test_search_path_before_cache(self, project, cache_root, fake_client):
        worktree = Worktree(project)
        locator = make_locator(worktree, cache_root, fake_client)

        with patch.object(worktree, "which", return_value="/usr/bin/dprint"):
            assert locator.binary_path() == "/usr/bin/dprint"

        assert fake_client.latest_release_calls == []

    @pytest.mark.skipif(os.name == "nt", reason="POSIX executables")
    def test_unparseable_manifests_fall_through_to_search_path(
        self, project, tmp_path, cache_root, fake_client
    ):
        (project / "package.json").write_text('{"x": ' + "9" * 5000 + "}")
        (project / "deno.json").write_text("[" * 100000)
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir()
        exe = bin_dir / "dprint"
        exe.write_text("#!/bin/sh\n")
        exe.chmod(0o755)
        locator = make_locator(
            Worktree(project, path_env=str(bin_dir)), cache_root, fake_client
        )

        assert locator.binary_path() == str(exe)
        assert fake_client.latest_release_calls == []

    def test_build_chain_order(self, empty_path_worktree, cache_root, fake_client):
        chain = make_locator(empty_path_worktree, cache_root, fake_client).build_chain()

        assert isinstance(chain, ChainedBinarySource)
        assert [s.name for s in chain.sources] == ["settings", "worktree", "path", "cache"]


class TestAutoInstallTier:
    def test_fresh_install(self, empty_path_worktree, cache_root, fake_client):
        (cache_root / "dprint-0.49.0").mkdir()
        (cache_root / "dprint-0.49.0" / "dprint").write_text("old")
        statuses = []
        locator = make_locator(
            empty_path_worktree,
            cache_root,
            fake_client,
            observer=CallbackStatusObserver(statuses.append),
        )

        path = locator.binary_path()

        assert path == str(cache_root / "dprint-0.50.0" / "dprint")
        assert not (cache_root / "dprint-0.49.0").exists()
        assert statuses == [
            InstallationStatus.CHECKING_FOR_UPDATE,
            InstallationStatus.DOWNLOADING,
        ]

    def test_reuses_cached_release(
        self, empty_path_worktree, cache_root, client_factory, release_factory
    ):
        client = client_factory(
            release=release_factory("0.49.0", ["dprint-x86_64-unknown-linux-gnu.zip"])
        )
        (cache_root / "dprint-0.49.0").mkdir()
        (cache_root / "dprint-0.49.0" / "dprint").write_text("cached")
        locator = make_locator(empty_path_worktree, cache_root, client)

        assert locator.binary_path() == str(cache_root / "dprint-0.49.0" / "dprint")
        assert client.download_calls == []

    def test_platform_override(self, empty_path_worktree, cache_root, fake_client):
        locator = BinaryLocator(
            empty_path_worktree,
            Settings(),
            cache_root,
            client=fake_client,
            platform=PlatformInfo("linux", "aarch64"),
        )

        with pytest.raises(AssetNotFoundError, match="dprint-aarch64-unknown-linux-gnu.zip"):
            locator.binary_path()

    def test_index_error_propagates(self, empty_path_worktree, cache_root, client_factory):
        client = client_factory(error=ReleaseIndexError("offline"))
        locator = make_locator(empty_path_worktree, cache_root, client)

        with pytest.raises(ReleaseIndexError):
            locator.binary_path()

    def test_resolution_is_not_memoized(self, empty_path_worktree, cache_root, fake_client):
        locator = make_locator(empty_path_worktree, cache_root, fake_client)

        locator.binary_path()
        locator.binary_path()

        assert len(fake_client.latest_release_calls) == 2
        assert len(fake_client.download_calls) == 1


class TestCommand:
    def test_default_arguments(self, cache_root, fake_client, project):
        settings = Settings(binary=BinarySettings(path="/custom/dprint"))
        command = make_locator(Worktree(project), cache_root, fake_client, settings).command()

        assert command == LaunchCommand("/custom/dprint", DEFAULT_ARGUMENTS, {})
        assert command.argv() == ["/custom/dprint", "lsp"]

    def test_configured_arguments(self, cache_root, fake_client, project):
        settings = Settings(
            binary=BinarySettings(path="/custom/dprint", arguments=["lsp", "--log-level=debug"])
        )
        locator = make_locator(Worktree(project), cache_root, fake_client, settings)

        assert locator.arguments() == ["lsp", "--log-level=debug"]

    def test_arguments_are_copies(self, cache_root, fake_client, project):
        locator = make_locator(Worktree(project), cache_root, fake_client)

        locator.arguments().append("extra")

        assert DEFAULT_ARGUMENTS == ["lsp"]
        assert locator.arguments() == ["lsp"]

    def test_default_client_uses_token(self, project, cache_root):
        locator = BinaryLocator(
            Worktree(project), Settings(github_token="tok"), cache_root
        )

        assert locator.client.session.headers["Authorization"] == "Bearer tok"
