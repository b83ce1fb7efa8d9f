"""Tests for children() and the lazy descendants() walk."""

import types

from fileurl import File


def _names(urls, root):
    return ["/".join(u.elements[len(root.elements):]) for u in urls]


class TestChildren:
    """Test immediate child listing."""

    def test_children_sorted(self, tmp_path):
        """Children come back in name order as FileUrls under the parent."""
        for name in ["c", "a", "b"]:
            (tmp_path / name).write_bytes(b"")
        root = File(tmp_path)
        children = root.children()
        assert [c.filename for c in children] == ["a", "b", "c"]
        assert all(c.parent == root for c in children)

    def test_children_of_file(self, tmp_path):
        """A file has no children."""
        (tmp_path / "f").write_bytes(b"x")
        assert (File(tmp_path) / "f").children() == []

    def test_children_of_missing(self, tmp_path):
        """A missing path has no children."""
        assert (File(tmp_path) / "nope").children() == []


class TestDescendants:
    """Test the depth-first walk."""

    def test_empty_directory(self, tmp_path):
        """An empty directory has no descendants."""
        assert list(File(tmp_path).descendants()) == []

    def test_file_and_empty_subdirectory(self, tmp_path):
        """One file plus one empty directory gives exactly two entries."""
        (tmp_path / "file.txt").write_bytes(b"x")
        (tmp_path / "sub").mkdir()
        root = File(tmp_path)
        assert _names(root.descendants(), root) == ["file.txt", "sub"]

    def test_pre_order(self, tmp_path):
        """Each directory is yielded before its own contents."""
        (tmp_path / "a" / "b").mkdir(parents=True)
        (tmp_path / "a" / "b" / "deep.txt").write_bytes(b"")
        (tmp_path / "a" / "mid.txt").write_bytes(b"")
        (tmp_path / "z.txt").write_bytes(b"")
        root = File(tmp_path)
        assert _names(root.descendants(), root) == [
            "a",
            "a/b",
            "a/b/deep.txt",
            "a/mid.txt",
            "z.txt",
        ]

    def test_is_lazy(self, tmp_path):
        """descendants() returns a generator that lists on demand."""
        (tmp_path / "a").mkdir()
        root = File(tmp_path)
        walk = root.descendants()
        assert isinstance(walk, types.GeneratorType)
        assert next(walk) == root / "a"
        # Created after the walk started but before "a" is listed.
        (tmp_path / "a" / "late.txt").write_bytes(b"")
        assert list(walk) == [root / "a" / "late.txt"]

    def test_restartable(self, tmp_path):
        """Each call walks the tree afresh."""
        root = File(tmp_path)
        assert list(root.descendants()) == []
        (tmp_path / "new").write_bytes(b"")
        assert list(root.descendants()) == [root / "new"]

    def test_descendants_of_file(self, tmp_path):
        """A file has no descendants."""
        (tmp_path / "f").write_bytes(b"x")
        assert list((File(tmp_path) / "f").descendants()) == []
