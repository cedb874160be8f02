"""Shared fixtures: the same small tree served from memory and from disk."""

from pathlib import Path

import pytest

from blobfs import BlobFS, LocalBucket, MemoryBucket

TESTDATA = Path(__file__).parent / "testdata"

TREE = {
    "foo.txt": b"foo\n",
    "bar.txt": b"bar\n",
    "dir1/hoge.txt": b"hoge\n",
    "dir1/dir1-1/fuga.txt": b"fuga\n",
    "dir2/hello.txt": b"hello, world\n",
}


@pytest.fixture
def bucket():
    return MemoryBucket(TREE)


@pytest.fixture
def fsys(bucket):
    return BlobFS(bucket)


@pytest.fixture
def local_fsys():
    return BlobFS(LocalBucket(TESTDATA))


class CountingBucket:
    """Wraps a bucket and records every call made to it."""

    def __init__(self, inner):
        self.inner = inner
        self.calls = []

    def list(self, prefix="", delimiter="/"):
        self.calls.append(("list", prefix))
        return self.inner.list(prefix, delimiter)

    def attributes(self, key):
        self.calls.append(("attributes", key))
        return self.inner.attributes(key)

    def range_read(self, key, offset, length):
        self.calls.append(("range_read", key, offset, length))
        return self.inner.range_read(key, offset, length)


@pytest.fixture
def counting_bucket(bucket):
    return CountingBucket(bucket)
