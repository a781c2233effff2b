"""Tests for glob-pattern asset copying."""

import shutil
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

import pytest

from toolpack.asset_copier import copy_matching, copy_pattern
from toolpack.errors import CopyError


@pytest.fixture
def asset_tree(tmp_path):
    """Source tree with assets at the top level and in nested folders."""
    src = tmp_path / "src"
    (src / "img" / "icons").mkdir(parents=True)
    (src / "icon.png").write_bytes(b"\x89PNG top")
    (src / "logo.svg").write_text("<svg/>", encoding="utf-8")
    (src / "config.json").write_text("{}", encoding="utf-8")
    (src / "index.ts").write_text("export {};", encoding="utf-8")
    (src / "img" / "icons" / "deep.png").write_bytes(b"\x89PNG deep")
    dest = tmp_path / "out"
    dest.mkdir()
    return src, dest


class TestCopyPattern:
    """Tests for copying a single pattern."""

    def test_top_level_pattern(self, asset_tree):
        src, dest = asset_tree

        copied = copy_pattern(src, dest, "*.png")

        assert copied == [dest / "icon.png"]
        assert (dest / "icon.png").read_bytes() == b"\x89PNG top"
        assert not (dest / "img").exists()

    def test_recursive_pattern_preserves_relative_paths(self, asset_tree):
        src, dest = asset_tree

        copied = copy_pattern(src, dest, "**/*.png")

        assert sorted(copied) == sorted([dest / "icon.png", dest / "img" / "icons" / "deep.png"])
        assert (dest / "img" / "icons" / "deep.png").read_bytes() == b"\x89PNG deep"

    def test_no_matches_is_not_an_error(self, asset_tree):
        src, dest = asset_tree

        assert copy_pattern(src, dest, "*.gif") == []
        assert list(dest.iterdir()) == []

    def test_skip_leaves_out_reserved_paths(self, asset_tree):
        src, dest = asset_tree
        (src / "package.json").write_text('{"name": "inner"}', encoding="utf-8")
        (src / "img" / "package.json").write_text("{}", encoding="utf-8")

        copied = copy_pattern(src, dest, "**/*.json", skip=("package.json",))

        assert sorted(copied) == sorted([dest / "config.json", dest / "img" / "package.json"])
        assert not (dest / "package.json").exists()

    def test_io_failure_raises_copy_error_with_pattern(self, asset_tree):
        src, dest = asset_tree

        with patch("toolpack.asset_copier.shutil.copy2", side_effect=PermissionError("denied")):
            with pytest.raises(CopyError) as exc_info:
                copy_pattern(src, dest, "*.svg")

        assert exc_info.value.pattern == "*.svg"
        assert isinstance(exc_info.value.cause, PermissionError)


class TestCopyMatching:
    """Tests for concurrent multi-pattern copies."""

    def test_copies_every_pattern(self, asset_tree):
        src, dest = asset_tree

        copy_matching(src, dest, ["*.png", "*.svg", "*.json"])

        assert sorted(p.name for p in dest.iterdir()) == ["config.json", "icon.png", "logo.svg"]

    def test_uses_given_executor(self, asset_tree):
        src, dest = asset_tree

        with ThreadPoolExecutor(max_workers=2) as executor:
            copied = copy_matching(src, dest, ["*.png", "*.svg"], executor=executor)

        assert [p.name for p in copied] == ["icon.png", "logo.svg"]

    def test_one_failing_pattern_fails_the_whole_copy(self, asset_tree):
        src, dest = asset_tree
        real_copy = shutil.copy2

        def flaky_copy(source, target):
            if str(source).endswith(".svg"):
                raise OSError("disk full")
            return real_copy(source, target)

        with patch("toolpack.asset_copier.shutil.copy2", side_effect=flaky_copy):
            with pytest.raises(CopyError) as exc_info:
                copy_matching(src, dest, ["*.png", "*.svg", "*.json"])

        assert exc_info.value.pattern == "*.svg"
        # The other patterns still ran to completion
        assert (dest / "icon.png").exists()
        assert (dest / "config.json").exists()
