"""
Tests for filesystem utilities.
"""

import io
import os
import tarfile
import zipfile

import pytest

from dprintkit.core.filesystem import (
    ArchiveExtractionError,
    FilesystemError,
    InsecureArchiveError,
    UnsupportedArchiveFormat,
    extract_archive,
    is_relative_to,
    make_executable,
    safe_rmtree,
    safe_unlink,
)


class TestExtractArchive:
    def test_extract_zip(self, tmp_path, zip_factory):
        archive = tmp_path / "dprint.zip"
        archive.write_bytes(zip_factory({"dprint": b"bin", "docs/README": b"hi"}))
        dest = tmp_path / "out"

        extract_archive(archive, dest)

        assert (dest / "dprint").read_bytes() == b"bin"
        assert (dest / "docs" / "README").read_bytes() == b"hi"

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_extract_zip_keeps_exec_bit(self, tmp_path, zip_factory):
        archive = tmp_path / "dprint.zip"
        archive.write_bytes(zip_factory({"dprint": b"bin"}))
        dest = tmp_path / "out"

        extract_archive(archive, dest)

        assert os.access(dest / "dprint", os.X_OK)

    def test_extract_tar_gz(self, tmp_path):
        archive = tmp_path / "dprint.tar.gz"
        with tarfile.open(archive, "w:gz") as tar:
            data = b"bin"
            info = tarfile.TarInfo("dprint")
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
        dest = tmp_path / "out"

        extract_archive(archive, dest)

        assert (dest / "dprint").read_bytes() == b"bin"

    def test_progress_callback(self, tmp_path, zip_factory):
        archive = tmp_path / "dprint.zip"
        archive.write_bytes(zip_factory({"a": b"1", "b": b"2"}))
        calls = []

        extract_archive(archive, tmp_path / "out", lambda c, t: calls.append((c, t)))

        assert calls == [(1, 2), (2, 2)]

    def test_missing_archive(self, tmp_path):
        with pytest.raises(ArchiveExtractionError, match="not found"):
            extract_archive(tmp_path / "missing.zip", tmp_path / "out")

    def test_unsupported_format(self, tmp_path):
        archive = tmp_path / "dprint.rar"
        archive.write_bytes(b"data")
        with pytest.raises(UnsupportedArchiveFormat):
            extract_archive(archive, tmp_path / "out")

    def test_corrupt_zip(self, tmp_path):
        archive = tmp_path / "dprint.zip"
        archive.write_bytes(b"not a zip")
        with pytest.raises(ArchiveExtractionError, match="Failed to extract"):
            extract_archive(archive, tmp_path / "out")

    def test_traversal_blocked(self, tmp_path):
        archive = tmp_path / "evil.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr("../escape.txt", "x")

        with pytest.raises(InsecureArchiveError):
            extract_archive(archive, tmp_path / "out")
        assert not (tmp_path / "escape.txt").exists()


def write_tar_gz(archive, members):
    """Write (TarInfo, bytes-or-None) pairs into a gzipped tarball."""
    with tarfile.open(archive, "w:gz") as tar:
        for info, data in members:
            if data is None:
                tar.addfile(info)
            else:
                info.size = len(data)
                tar.addfile(info, io.BytesIO(data))


def link_info(name, linkname, link_type=tarfile.SYMTYPE):
    info = tarfile.TarInfo(name)
    info.type = link_type
    info.linkname = linkname
    return info


class TestTarLinks:
    def test_symlink_escaping_destination(self, tmp_path):
        archive = tmp_path / "evil.tar.gz"
        write_tar_gz(archive, [(link_info("bin/dprint", "../../../etc/passwd"), None)])

        with pytest.raises(InsecureArchiveError, match="resolves outside"):
            extract_archive(archive, tmp_path / "out")

    def test_absolute_symlink(self, tmp_path):
        archive = tmp_path / "evil.tar.gz"
        write_tar_gz(archive, [(link_info("dprint", "/usr/bin/env"), None)])

        with pytest.raises(InsecureArchiveError):
            extract_archive(archive, tmp_path / "out")

    def test_hardlink_escaping_destination(self, tmp_path):
        archive = tmp_path / "evil.tar.gz"
        write_tar_gz(
            archive, [(link_info("dprint", "../outside", tarfile.LNKTYPE), None)]
        )

        with pytest.raises(InsecureArchiveError):
            extract_archive(archive, tmp_path / "out")

    def test_device_file(self, tmp_path):
        archive = tmp_path / "evil.tar.gz"
        info = tarfile.TarInfo("dev")
        info.type = tarfile.CHRTYPE
        write_tar_gz(archive, [(info, None)])

        with pytest.raises(InsecureArchiveError, match="device files"):
            extract_archive(archive, tmp_path / "out")

    @pytest.mark.skipif(os.name == "nt", reason="POSIX symlinks")
    def test_internal_symlink_is_allowed(self, tmp_path):
        archive = tmp_path / "dprint.tar.gz"
        write_tar_gz(
            archive,
            [
                (tarfile.TarInfo("bin/dprint-real"), b"bin"),
                (link_info("bin/dprint", "dprint-real"), None),
            ],
        )
        dest = tmp_path / "out"

        extract_archive(archive, dest)

        assert (dest / "bin" / "dprint").read_bytes() == b"bin"


class TestSafeRemoval:
    def test_rmtree(self, tmp_path):
        target = tmp_path / "dprint-0.49.0"
        (target / "nested").mkdir(parents=True)
        (target / "nested" / "file").write_text("x")

        safe_rmtree(target, require_prefix=tmp_path)

        assert not target.exists()

    def test_rmtree_missing_is_noop(self, tmp_path):
        safe_rmtree(tmp_path / "missing")

    def test_rmtree_outside_prefix(self, tmp_path):
        inside = tmp_path / "cache"
        outside = tmp_path / "other"
        inside.mkdir()
        outside.mkdir()

        with pytest.raises(ValueError, match="Refusing to delete"):
            safe_rmtree(outside, require_prefix=inside)
        assert outside.exists()

    def test_rmtree_on_file(self, tmp_path):
        f = tmp_path / "file"
        f.write_text("x")
        with pytest.raises(FilesystemError, match="not a directory"):
            safe_rmtree(f)

    def test_unlink(self, tmp_path):
        f = tmp_path / "dprint-stray"
        f.write_text("x")
        safe_unlink(f)
        assert not f.exists()
        safe_unlink(f)


@pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
def test_make_executable(tmp_path):
    f = tmp_path / "dprint"
    f.write_text("x")
    f.chmod(0o644)

    make_executable(f)

    assert os.access(f, os.X_OK)


def test_is_relative_to(tmp_path):
    assert is_relative_to(tmp_path / "a" / "b", tmp_path)
    assert not is_relative_to(tmp_path, tmp_path / "a")
