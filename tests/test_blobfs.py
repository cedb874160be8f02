"""Tests for the BlobFS facade."""

import pytest

from blobfs import (
    BackendError,
    BlobDir,
    BlobFile,
    BlobFS,
    BucketError,
    InvalidPathError,
    IsDirectoryError,
    MemoryBucket,
    NotDirectoryError,
    NotExistError,
    connect_bucket,
)

from conftest import TREE


def names(entries):
    return sorted(e.name for e in entries)


class TestOpen:
    def test_open_file(self, fsys):
        f = fsys.open("foo.txt")
        assert isinstance(f, BlobFile)
        assert f.stat().size == 4

    def test_open_directory(self, fsys):
        d = fsys.open("dir1")
        assert isinstance(d, BlobDir)
        assert d.stat().is_dir

    def test_open_root(self, fsys):
        d = fsys.open(".")
        assert isinstance(d, BlobDir)
        assert d.stat().name == "."

    def test_open_missing(self, fsys):
        with pytest.raises(NotExistError) as exc_info:
            fsys.open("dir1/nope.txt")
        err = exc_info.value
        assert err.op == "open"
        assert err.path == "dir1/nope.txt"
        assert str(err) == "open dir1/nope.txt: file does not exist"

    def test_open_invalid(self, fsys):
        with pytest.raises(InvalidPathError) as exc_info:
            fsys.open("../x")
        assert exc_info.value.op == "open"

    def test_open_wraps_bucket_failure(self):
        class Unavailable:
            def attributes(self, key):
                raise BucketError("service unavailable")

        with pytest.raises(BackendError) as exc_info:
            BlobFS(Unavailable()).open("foo.txt")
        assert exc_info.value.op == "open"
        assert isinstance(exc_info.value.__cause__, BucketError)

    def test_open_wraps_listing_failure(self, bucket):
        class ListFailsAfterProbe:
            def __init__(self):
                self.lists = 0

            def attributes(self, key):
                return bucket.attributes(key)

            def list(self, prefix="", delimiter="/"):
                self.lists += 1
                if self.lists > 1:
                    raise BucketError("listing failed")
                return bucket.list(prefix, delimiter)

        with pytest.raises(BackendError):
            BlobFS(ListFailsAfterProbe()).open("dir1")

    def test_capability_checks(self, fsys):
        f = fsys.open("foo.txt")
        d = fsys.open("dir1")
        assert fsys.as_file(f) is f
        assert fsys.as_dir(d) is d
        with pytest.raises(IsDirectoryError):
            fsys.as_file(d)
        with pytest.raises(NotDirectoryError):
            fsys.as_dir(f)
        with pytest.raises(IsDirectoryError) as exc_info:
            fsys.as_file(fsys.open("."))
        assert exc_info.value.path == "."


class TestReadFile:
    @pytest.mark.parametrize("path", sorted(TREE))
    def test_read_file(self, fsys, path):
        assert fsys.read_file(path) == TREE[path]

    def test_matches_sequential_reads(self, fsys):
        with fsys.open("dir2/hello.txt") as f:
            chunks = []
            while chunk := f.read(4):
                chunks.append(chunk)
        assert b"".join(chunks) == fsys.read_file("dir2/hello.txt")

    def test_single_range_read(self, counting_bucket):
        BlobFS(counting_bucket).read_file("foo.txt")
        assert counting_bucket.calls == [
            ("attributes", "foo.txt"),
            ("range_read", "foo.txt", 0, 4),
        ]

    def test_empty_file(self):
        fsys = BlobFS(MemoryBucket({"empty": b""}))
        assert fsys.read_file("empty") == b""

    def test_directory_fails(self, fsys):
        with pytest.raises(IsDirectoryError) as exc_info:
            fsys.read_file("dir1")
        assert exc_info.value.op == "read"
        assert exc_info.value.path == "dir1"

    def test_root_fails_with_requested_path(self, fsys):
        with pytest.raises(IsDirectoryError) as exc_info:
            fsys.read_file(".")
        assert exc_info.value.path == "."
        assert str(exc_info.value) == "read .: is a directory"

    def test_missing_fails(self, fsys):
        with pytest.raises(FileNotFoundError):
            fsys.read_file("nope.txt")

    def test_short_read_fails(self):
        class Truncating(MemoryBucket):
            def range_read(self, key, offset, length):
                return super().range_read(key, offset, max(length - 1, 1))

        fsys = BlobFS(Truncating({"a.txt": b"abcdef"}))
        with pytest.raises(BackendError):
            fsys.read_file("a.txt")


class TestReadDir:
    def test_root(self, fsys):
        entries = fsys.read_dir(".")
        assert names(entries) == ["bar.txt", "dir1", "dir2", "foo.txt"]
        flags = {e.name: e.is_dir for e in entries}
        assert flags == {"bar.txt": False, "dir1": True, "dir2": True, "foo.txt": False}

    def test_subdirectory(self, fsys):
        entries = fsys.read_dir("dir1")
        assert sorted(e.key for e in entries) == ["dir1/dir1-1", "dir1/hoge.txt"]

    def test_nested(self, fsys):
        assert [e.key for e in fsys.read_dir("dir1/dir1-1")] == ["dir1/dir1-1/fuga.txt"]

    def test_file_fails(self, fsys):
        with pytest.raises(NotDirectoryError) as exc_info:
            fsys.read_dir("foo.txt")
        assert exc_info.value.op == "read"
        assert exc_info.value.path == "foo.txt"

    def test_missing_fails(self, fsys):
        with pytest.raises(NotExistError):
            fsys.read_dir("nope")

    def test_list_names(self, fsys):
        assert fsys.list() == ["bar.txt", "dir1", "dir2", "foo.txt"]
        assert fsys.list("dir1") == ["dir1-1", "hoge.txt"]


class TestStat:
    def test_stat_file(self, fsys):
        entry = fsys.stat("dir1/hoge.txt")
        assert entry.size == 5
        assert not entry.is_dir

    def test_stat_directory(self, fsys):
        assert fsys.stat("dir2").is_dir

    def test_stat_missing(self, fsys):
        with pytest.raises(NotExistError) as exc_info:
            fsys.stat("nope")
        assert exc_info.value.op == "stat"

    def test_exists(self, fsys):
        assert fsys.exists(".")
        assert fsys.exists("foo.txt")
        assert fsys.exists("dir1/dir1-1")
        assert not fsys.exists("dir1/nope.txt")
        assert not fsys.exists("../x")

    def test_isfile_isdir(self, fsys):
        assert fsys.isfile("foo.txt")
        assert not fsys.isfile("dir1")
        assert fsys.isdir("dir1")
        assert fsys.isdir(".")
        assert not fsys.isdir("foo.txt")
        assert not fsys.isdir("nope")


class TestWalk:
    def test_walk(self, fsys):
        walked = {dirpath: (sorted(d), sorted(f)) for dirpath, d, f in fsys.walk()}
        assert walked == {
            ".": (["dir1", "dir2"], ["bar.txt", "foo.txt"]),
            "dir1": (["dir1-1"], ["hoge.txt"]),
            "dir1/dir1-1": ([], ["fuga.txt"]),
            "dir2": ([], ["hello.txt"]),
        }

    def test_walk_every_file_readable(self, fsys):
        for dirpath, _dirs, files in fsys.walk():
            for name in files:
                path = name if dirpath == "." else f"{dirpath}/{name}"
                assert fsys.read_file(path) == TREE[path]


class TestFromConfig:
    def test_memory_config(self):
        fsys = BlobFS.from_config(connect_bucket(type="memory", objects={"a/b.txt": b"b"}))
        assert fsys.read_file("a/b.txt") == b"b"
        assert fsys.list() == ["a"]
