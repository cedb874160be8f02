"""Directory handle over a snapshot of a delimiter listing."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .base import SEPARATOR, Entry
from .errors import IsDirectoryError

if TYPE_CHECKING:
    from .base import Bucket

logger = logging.getLogger(__name__)


def dir_prefix(entry: Entry) -> str:
    """Listing prefix for the children of a directory entry."""
    return entry.key + SEPARATOR if entry.key else ""


class BlobDir:
    """Open directory with a paginated list of its immediate children.

    Children are listed once, when the handle is created; later changes to
    the bucket are not reflected.

    Attributes:
        entry: The resolved directory entry.
        entries: Child entries in bucket listing order.
        offset: Number of children already returned by ``read_dir``.
    """

    def __init__(self, entry: Entry, bucket: "Bucket"):
        """List the children of ``entry``.

        Args:
            entry: Directory entry (the root or a virtual directory).
            bucket: Bucket to list.

        Raises:
            BucketError: If the listing fails part way; no handle is created.
        """
        self.entry = entry
        self.entries = list(self._list_children(entry, bucket))
        self.offset = 0
        self._closed = False
        logger.debug("Opened directory %r with %d entries", entry.path, len(self.entries))

    @staticmethod
    def _list_children(entry: Entry, bucket: "Bucket"):
        prefix = dir_prefix(entry)
        for obj in bucket.list(prefix, SEPARATOR):
            # Explicit "dir/" marker objects list as the prefix itself
            if obj.key == prefix:
                continue
            yield Entry.from_list_object(obj)

    @property
    def name(self) -> str:
        return self.entry.path

    def stat(self) -> Entry:
        """Return the entry this handle was opened on."""
        return self.entry

    def read_dir(self, n: int = -1) -> list[Entry]:
        """Return the next children.

        Args:
            n: With ``n > 0``, return at most ``n`` children not yet returned.
                With ``n <= 0``, return every remaining child.

        Returns:
            Child entries. With ``n <= 0`` an exhausted handle returns ``[]``.

        Raises:
            EOFError: If ``n > 0`` and every child has already been returned.
        """
        count = len(self.entries) - self.offset
        if n > 0 and count > n:
            count = n
        if count == 0:
            if n <= 0:
                return []
            raise EOFError(f"read_dir {self.name or '.'}: no more entries")
        chunk = self.entries[self.offset : self.offset + count]
        self.offset += count
        return chunk

    def read(self, size: int = -1) -> bytes:
        """Directories are not byte-readable."""
        raise IsDirectoryError("read", self.name)

    def readinto(self, buffer: bytearray | memoryview) -> int:
        """Directories are not byte-readable."""
        raise IsDirectoryError("read", self.name)

    def close(self) -> None:
        """Close is a no-op (the listing is already in memory)."""
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "BlobDir":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __iter__(self):
        return iter(self.read_dir(-1))

    def __repr__(self) -> str:
        return f"BlobDir(name={self.name!r}, entries={len(self.entries)}, offset={self.offset})"
