"""
Unit tests for merging a release tree into the destination directory.
"""

import os
from unittest.mock import patch

import pytest

from dojobuilder.reconcile import (
    default_build_exclude,
    is_match_any,
    make_exclude_func,
    reconcile,
    skip_nothing,
)


def make_tree(root, files):
    """Create `files` (relative path -> bytes) below `root`."""
    for relpath, content in files.items():
        path = root / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)


def tree_listing(root):
    """Return every path below `root`, relative and sorted."""
    return sorted(
        str(path.relative_to(root)).replace(os.sep, "/")
        for path in root.rglob("*")
    )


@pytest.fixture
def release_dir(temp_dir):
    path = temp_dir / "release_tmp"
    path.mkdir()
    return path


@pytest.fixture
def out_dir(temp_dir):
    path = temp_dir / "out"
    path.mkdir()
    return path


@pytest.mark.unit
class TestDefaultBuildExclude:

    def _file_stat(self, temp_dir):
        path = temp_dir / "f"
        path.write_text("")
        return os.lstat(path)

    def test_uncompressed_file_is_skipped(self, temp_dir):
        info = self._file_stat(temp_dir)

        assert default_build_exclude("/r/app/app.js.uncompressed.js", info) is True
        assert default_build_exclude("/r/app/app.js.consoleStripped.js", info) is True

    def test_compressed_file_is_kept(self, temp_dir):
        info = self._file_stat(temp_dir)

        assert default_build_exclude("/r/app/app.js", info) is False
        assert default_build_exclude("/r/app/app.css", info) is False

    def test_directories_are_never_skipped(self, temp_dir):
        info = os.lstat(temp_dir)

        assert default_build_exclude("/r/app.js.uncompressed.js", info) is False


@pytest.mark.unit
class TestExcludeHelpers:

    def test_is_match_any_searches_whole_path(self):
        assert is_match_any([r"nls/"], "/r/dojo/nls/en/strings.js")
        assert not is_match_any([r"^nls/"], "/r/dojo/nls/en/strings.js")
        assert not is_match_any([], "/anything")

    def test_make_exclude_func_separates_files_and_dirs(self, temp_dir):
        file_path = temp_dir / "tests.js"
        file_path.write_text("")
        dir_path = temp_dir / "tests"
        dir_path.mkdir()
        exclude = make_exclude_func(file_patterns=[r"\.map$"], dir_patterns=[r"/tests$"])

        assert exclude(str(dir_path), os.lstat(dir_path)) is True
        assert exclude(str(file_path), os.lstat(file_path)) is False
        assert exclude("/r/app.js.map", os.lstat(file_path)) is True

    def test_skip_nothing(self, temp_dir):
        assert skip_nothing("/r/app.js.uncompressed.js", os.lstat(temp_dir)) is False


@pytest.mark.unit
class TestReconcile:

    def test_copies_tree_preserving_layout(self, release_dir, out_dir):
        make_tree(release_dir, {
            "dojo/dojo.js": b"dojo",
            "app/main.js": b"main",
            "app/nls/en/strings.js": b"strings",
        })

        result = reconcile(release_dir, out_dir)

        assert tree_listing(out_dir) == [
            "app",
            "app/main.js",
            "app/nls",
            "app/nls/en",
            "app/nls/en/strings.js",
            "dojo",
            "dojo/dojo.js",
        ]
        assert result.copied_files == 3
        assert result.created_dirs == 4
        assert result.skipped == 0

    def test_default_policy_drops_uncompressed_copy(self, release_dir, out_dir):
        make_tree(release_dir, {
            "app.js": b"compressed",
            "app.js.uncompressed.js": b"uncompressed",
            "app.js.consoleStripped.js": b"stripped",
        })

        result = reconcile(release_dir, out_dir)

        assert tree_listing(out_dir) == ["app.js"]
        assert result.skipped == 2

    def test_default_policy_keeps_directories_with_skip_names(self, release_dir, out_dir):
        make_tree(release_dir, {
            "main.js": b"main",
            "lib.js.uncompressed.js/inner.js": b"inner",
        })

        result = reconcile(release_dir, out_dir)

        # The directory is created; its file still matches by full path.
        assert tree_listing(out_dir) == ["lib.js.uncompressed.js", "main.js"]
        assert (out_dir / "lib.js.uncompressed.js").is_dir()
        assert result.created_dirs == 1
        assert result.copied_files == 1
        assert result.skipped == 1

    def test_file_content_is_byte_identical(self, release_dir, out_dir):
        payload = bytes(range(256)) * 64
        make_tree(release_dir, {"app/blob.bin": payload})

        reconcile(release_dir, out_dir)

        assert (out_dir / "app" / "blob.bin").read_bytes() == payload

    def test_skipped_directory_is_pruned(self, release_dir, out_dir):
        make_tree(release_dir, {
            "app/main.js": b"main",
            "app.js.uncompressed.js/inner.js": b"inner",
            "app.js.uncompressed.js/deeper/keep.js": b"keep",
        })
        prune_matching_dirs = make_exclude_func(dir_patterns=[r".*\.js\.uncompressed\.js$"])
        visited = []

        def exclude(path, info):
            visited.append(path)
            return prune_matching_dirs(path, info)

        result = reconcile(release_dir, out_dir, exclude)

        assert tree_listing(out_dir) == ["app", "app/main.js"]
        assert not any("inner.js" in path or "deeper" in path for path in visited)
        assert result.skipped == 1

    def test_entries_visited_in_preorder(self, release_dir, out_dir):
        make_tree(release_dir, {"b/two.js": b"", "a/one.js": b"", "c.js": b""})
        visited = []

        def exclude(path, info):
            visited.append(os.path.relpath(path, release_dir).replace(os.sep, "/"))
            return False

        reconcile(release_dir, out_dir, exclude)

        assert visited == ["a", "a/one.js", "b", "b/two.js", "c.js"]

    def test_existing_destination_is_merged(self, release_dir, out_dir):
        make_tree(release_dir, {"app/main.js": b"new"})
        make_tree(out_dir, {"app/main.js": b"old content", "app/other.js": b"other"})

        result = reconcile(release_dir, out_dir)

        assert (out_dir / "app" / "main.js").read_bytes() == b"new"
        assert (out_dir / "app" / "other.js").read_bytes() == b"other"
        assert result.created_dirs == 0

    def test_predicate_error_aborts_walk(self, release_dir, out_dir):
        make_tree(release_dir, {"a.js": b"a", "b.js": b"b"})

        def exclude(path, info):
            if path.endswith("b.js"):
                raise RuntimeError("policy failure")
            return False

        with pytest.raises(RuntimeError, match="policy failure"):
            reconcile(release_dir, out_dir, exclude)

        assert tree_listing(out_dir) == ["a.js"]

    def test_copy_error_propagates(self, release_dir, out_dir):
        make_tree(release_dir, {"app/main.js": b"main"})
        # A file where the directory should go makes mkdir fail.
        (out_dir / "app").write_bytes(b"not a directory")

        with pytest.raises(OSError):
            reconcile(release_dir, out_dir)

    def test_missing_release_dir_is_a_no_op(self, temp_dir, out_dir, caplog):
        result = reconcile(temp_dir / "missing", out_dir)

        assert result.copied_files == 0
        assert tree_listing(out_dir) == []
        assert "does not exist" in caplog.text

    def test_chown_failures_are_ignored(self, release_dir, out_dir):
        make_tree(release_dir, {"app/main.js": b"main"})

        with patch("dojobuilder.reconcile.tree.os.chown", side_effect=PermissionError("denied"), create=True):
            result = reconcile(release_dir, out_dir)

        assert result.copied_files == 1
        assert (out_dir / "app" / "main.js").read_bytes() == b"main"

    @pytest.mark.skipif(not hasattr(os, "chown"), reason="platform has no chown")
    def test_ownership_is_propagated(self, release_dir, out_dir):
        make_tree(release_dir, {"app/main.js": b"main"})
        source = os.lstat(release_dir / "app" / "main.js")

        with patch("dojobuilder.reconcile.tree.os.chown") as mock_chown:
            reconcile(release_dir, out_dir)

        mock_chown.assert_any_call(out_dir / "app" / "main.js", source.st_uid, source.st_gid)
        assert mock_chown.call_count == 2

