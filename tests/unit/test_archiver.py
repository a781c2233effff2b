"""Tests for archive naming and zip writing."""

import zipfile
from unittest.mock import patch

import pytest

from toolpack.archiver import archive, archive_file_name, slugify_name
from toolpack.config import ArchiveNaming
from toolpack.errors import ArchiveError


@pytest.fixture
def staging(tmp_path):
    staging = tmp_path / "staging"
    (staging / "lib").mkdir(parents=True)
    (staging / "index.js").write_text("module.exports = 1;\n", encoding="utf-8")
    (staging / "package.json").write_text("{}\n", encoding="utf-8")
    (staging / "lib" / "util.js").write_text("// util\n", encoding="utf-8")
    publish = tmp_path / "publish"
    publish.mkdir()
    return staging, publish


class TestArchiveFileName:
    """Tests for archive naming."""

    @pytest.mark.parametrize(
        "name, version, expected",
        [
            ("demo", "1.0.0", "demo-1_0_0.zip"),
            ("demo", "1.0.17340-dev", "demo-1_0_17340-dev.zip"),
            ("@acme/demo", "2.3.4", "demo-2_3_4.zip"),
            ("tools/nested/demo", "0.0.1", "demo-0_0_1.zip"),
        ],
    )
    def test_slug_naming(self, name, version, expected):
        assert archive_file_name(name, version) == expected

    def test_plain_naming(self):
        assert archive_file_name("demo", "1.2.3", ArchiveNaming.PLAIN) == "demo-1.2.3.zip"

    def test_slugify_trailing_slash(self):
        assert slugify_name("demo/") == "demo"


class TestArchive:
    """Tests for archive()."""

    def test_children_are_top_level_entries(self, staging):
        staging_dir, publish = staging

        path = archive(staging_dir, publish, "demo-1_0_0.zip")

        assert path == publish / "demo-1_0_0.zip"
        with zipfile.ZipFile(path) as zf:
            assert sorted(zf.namelist()) == ["index.js", "lib/util.js", "package.json"]
            assert zf.read("index.js") == b"module.exports = 1;\n"
            assert all(info.compress_type == zipfile.ZIP_DEFLATED for info in zf.infolist())
            assert zf.testzip() is None

    def test_overwrites_existing_archive(self, staging, tmp_path):
        staging_dir, publish = staging
        archive(staging_dir, publish, "demo.zip")

        second = tmp_path / "second"
        second.mkdir()
        (second / "only.txt").write_text("second run", encoding="utf-8")
        path = archive(second, publish, "demo.zip")

        with zipfile.ZipFile(path) as zf:
            assert zf.namelist() == ["only.txt"]

    def test_replaces_non_zip_file(self, staging):
        staging_dir, publish = staging
        (publish / "demo.zip").write_text("garbage", encoding="utf-8")

        path = archive(staging_dir, publish, "demo.zip")

        assert zipfile.is_zipfile(path)

    def test_empty_staging_gives_empty_archive(self, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()

        path = archive(empty, tmp_path, "empty.zip")

        with zipfile.ZipFile(path) as zf:
            assert zf.namelist() == []

    def test_missing_publish_dir_raises_archive_error(self, staging, tmp_path):
        staging_dir, _ = staging

        with pytest.raises(ArchiveError) as exc_info:
            archive(staging_dir, tmp_path / "missing", "demo.zip")

        assert exc_info.value.archive_path == tmp_path / "missing" / "demo.zip"

    def test_write_error_leaves_partial_archive(self, staging):
        staging_dir, publish = staging

        with patch("toolpack.archiver.zipfile.ZipFile.write", side_effect=OSError("disk full")):
            with pytest.raises(ArchiveError):
                archive(staging_dir, publish, "demo.zip")

        assert (publish / "demo.zip").exists()
