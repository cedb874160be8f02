"""Read-only file system over a blob storage bucket.

Provides BlobFS, the single entry point that turns paths into open file or
directory handles backed by a ``Bucket``.
"""

from __future__ import annotations

import logging
from typing import Iterator, Union

from .base import Bucket, Entry
from .blobdir import BlobDir
from .blobfile import BlobFile
from .errors import (
    BackendError,
    InvalidPathError,
    IsDirectoryError,
    NotDirectoryError,
    NotExistError,
    PathError,
)
from .resolver import PathResolver

logger = logging.getLogger(__name__)

Handle = Union[BlobFile, BlobDir]


class BlobFS:
    """Read-only file system view over a bucket.

    Keys are treated as slash-separated paths. Directories are implicit
    (inferred from keys sharing a prefix, like S3) and the root is ".".

    Example:
        >>> from blobfs import MemoryBucket
        >>> bucket = MemoryBucket()
        >>> bucket.put("dir1/hoge.txt", b"hoge")
        >>> fsys = BlobFS(bucket)
        >>> fsys.read_file("dir1/hoge.txt")
        b'hoge'
        >>> [e.name for e in fsys.read_dir(".")]
        ['dir1']
    """

    def __init__(self, bucket: Bucket):
        """Initialize the file system.

        Args:
            bucket: Bucket providing list, attributes and range reads.
        """
        self.bucket = bucket
        self._resolver = PathResolver(bucket)

    @classmethod
    def from_config(cls, config) -> BlobFS:
        """Open the bucket described by ``config`` and wrap it."""
        from .config import open_bucket

        return cls(open_bucket(config))

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def _lookup(self, path: str, op: str) -> Entry:
        try:
            return self._resolver.lookup(path, op)
        except PathError:
            raise
        except OSError as exc:
            logger.warning("Lookup of %r failed: %s", path, exc)
            raise BackendError.wrap(op, path, exc) from exc

    def stat(self, path: str) -> Entry:
        """Get the entry for a path.

        Raises:
            InvalidPathError: If the path is malformed.
            NotExistError: If nothing exists at the path.
            BackendError: If the bucket fails.
        """
        return self._lookup(path, "stat")

    def exists(self, path: str) -> bool:
        """Check if a file or directory exists."""
        try:
            self._lookup(path, "stat")
        except (InvalidPathError, NotExistError):
            return False
        return True

    def isfile(self, path: str) -> bool:
        """Check if path is a stored object."""
        try:
            return not self._lookup(path, "stat").is_dir
        except (InvalidPathError, NotExistError):
            return False

    def isdir(self, path: str) -> bool:
        """Check if path is the root or a virtual directory."""
        try:
            return self._lookup(path, "stat").is_dir
        except (InvalidPathError, NotExistError):
            return False

    # -------------------------------------------------------------------------
    # Handles
    # -------------------------------------------------------------------------

    def open(self, path: str) -> Handle:
        """Open a path for reading.

        Args:
            path: Path to open ("." for the root).

        Returns:
            A ``BlobFile`` for stored objects, a ``BlobDir`` for directories.

        Raises:
            InvalidPathError: If the path is malformed.
            NotExistError: If nothing exists at the path.
            BackendError: If a bucket call fails, including a listing
                failure while building a directory handle.
        """
        entry = self._lookup(path, "open")
        if not entry.is_dir:
            return BlobFile(entry, self.bucket)
        try:
            return BlobDir(entry, self.bucket)
        except OSError as exc:
            logger.warning("Listing %r failed: %s", path, exc)
            raise BackendError.wrap("open", path, exc) from exc

    @staticmethod
    def as_file(handle: Handle, path: str | None = None) -> BlobFile:
        """Return ``handle`` as a file, or raise if it is a directory.

        ``path`` names the error; it defaults to the handle's own path.
        """
        if not isinstance(handle, BlobFile):
            raise IsDirectoryError("read", path or handle.name or ".")
        return handle

    @staticmethod
    def as_dir(handle: Handle, path: str | None = None) -> BlobDir:
        """Return ``handle`` as a directory, or raise if it is a file."""
        if not isinstance(handle, BlobDir):
            raise NotDirectoryError("read", path or handle.name or ".")
        return handle

    # -------------------------------------------------------------------------
    # Whole-file and whole-directory reads
    # -------------------------------------------------------------------------

    def read_file(self, path: str) -> bytes:
        """Read file contents as bytes.

        Args:
            path: File path to read.

        Returns:
            File contents as bytes.

        Raises:
            IsDirectoryError: If the path is a directory.
            NotExistError: If the file doesn't exist.
            BackendError: If the bucket read fails or comes up short.
        """
        with self.open(path) as handle:
            file = self.as_file(handle, path)
            buffer = bytearray(file.size)
            if not buffer:
                return b""
            n, eof = file.read_at(buffer, 0)
            if not eof:
                raise BackendError(
                    "read", path, f"short read: got {n} of {file.size} bytes"
                )
            return bytes(buffer)

    def read_dir(self, path: str = ".") -> list[Entry]:
        """Read all entries of a directory.

        Args:
            path: Directory path ("." for the root).

        Returns:
            Immediate children in bucket listing order.

        Raises:
            NotDirectoryError: If the path is a file.
            NotExistError: If the directory doesn't exist.
        """
        with self.open(path) as handle:
            return self.as_dir(handle, path).read_dir(-1)

    def list(self, path: str = ".") -> list[str]:
        """List directory contents (names only).

        Args:
            path: Directory path to list.

        Returns:
            Names of the immediate children.
        """
        return [entry.name for entry in self.read_dir(path)]

    def walk(self, path: str = ".") -> Iterator[tuple[str, list[str], list[str]]]:
        """Walk the tree top-down, like ``os.walk``.

        Yields:
            ``(dirpath, dirnames, filenames)`` for every directory under
            ``path``, where ``dirpath`` is the directory's path ("." for
            the root).
        """
        entries = self.read_dir(path)
        dirnames = [e.name for e in entries if e.is_dir]
        filenames = [e.name for e in entries if not e.is_dir]
        yield path, dirnames, filenames
        for name in dirnames:
            child = name if path == "." else f"{path}/{name}"
            yield from self.walk(child)
