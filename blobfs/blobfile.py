"""Read-only file handle over a single bucket object."""

from __future__ import annotations

import io
import logging
import os
from contextlib import closing
from typing import TYPE_CHECKING

from .base import Entry
from .errors import BackendError, SeekRangeError

if TYPE_CHECKING:
    from .base import Bucket

logger = logging.getLogger(__name__)


class BlobFile:
    """File-like object that maps reads onto ranged bucket reads.

    Nothing is buffered: every read issues one ranged read against the bucket
    starting at the cursor. The cursor is a plain attribute, so a handle must
    not be shared between concurrent readers.

    Attributes:
        entry: The resolved file entry.
        offset: Current read cursor, between 0 and ``entry.size``.
    """

    def __init__(self, entry: Entry, bucket: "Bucket"):
        """Wrap a resolved file entry.

        Args:
            entry: Entry of a stored object (not a directory).
            bucket: Bucket the object lives in.
        """
        self.entry = entry
        self._bucket = bucket
        self.offset = 0
        self._closed = False

    @property
    def name(self) -> str:
        return self.entry.path

    @property
    def size(self) -> int:
        return self.entry.size

    def stat(self) -> Entry:
        """Return the entry this handle was opened on."""
        return self.entry

    def _range_read(self, buffer: memoryview, offset: int, op: str) -> int:
        """Fill ``buffer`` from one ranged read at ``offset``."""
        length = len(buffer)
        logger.debug("Range read %r offset=%d length=%d", self.name, offset, length)
        try:
            with closing(self._bucket.range_read(self.name, offset, length)) as stream:
                data = stream.read(length)
        except OSError as exc:
            logger.warning("Range read of %r failed: %s", self.name, exc)
            raise BackendError.wrap(op, self.name, exc) from exc
        n = len(data)
        buffer[:n] = data
        return n

    def readinto(self, buffer: bytearray | memoryview) -> int:
        """Read into ``buffer`` from the cursor and advance it.

        Args:
            buffer: Writable buffer; up to ``len(buffer)`` bytes are read.

        Returns:
            Number of bytes read. 0 with a non-empty buffer means end of file.

        Raises:
            BackendError: If the bucket read fails.
        """
        view = memoryview(buffer).cast("B")
        if len(view) == 0:
            return 0
        if self.offset >= self.size:
            return 0
        n = self._range_read(view, self.offset, "read")
        self.offset += n
        return n

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes from the cursor (the rest if negative).

        Returns:
            The bytes read; ``b""`` at end of file.
        """
        remaining = self.size - self.offset
        if size is None or size < 0 or size > remaining:
            size = max(remaining, 0)
        buffer = bytearray(size)
        n = self.readinto(buffer)
        return bytes(buffer[:n])

    def read_at(self, buffer: bytearray | memoryview, offset: int) -> tuple[int, bool]:
        """Read into ``buffer`` starting at ``offset``, leaving the cursor alone.

        Reaching exactly the end of the object reports end of file together
        with the bytes read, even when the bucket itself reported success.

        Args:
            buffer: Writable buffer; up to ``len(buffer)`` bytes are read.
            offset: Absolute position in the object.

        Returns:
            ``(n, eof)``: bytes read and whether the read hit end of file.

        Raises:
            SeekRangeError: If ``offset`` is negative.
            BackendError: If the bucket read fails.
        """
        if offset < 0:
            raise SeekRangeError("read", self.name, "negative offset")
        view = memoryview(buffer).cast("B")
        if len(view) == 0:
            return 0, False
        if offset >= self.size:
            return 0, True
        n = self._range_read(view, offset, "read")
        return n, offset + n == self.size

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        """Move the cursor.

        Args:
            offset: Offset relative to ``whence``.
            whence: ``os.SEEK_SET``, ``os.SEEK_CUR`` or ``os.SEEK_END``.

        Returns:
            The new absolute cursor position.

        Raises:
            SeekRangeError: If ``whence`` is unknown or the target falls
                outside ``[0, size]``. The cursor is left unchanged.
        """
        if whence == os.SEEK_SET:
            target = offset
        elif whence == os.SEEK_CUR:
            target = self.offset + offset
        elif whence == os.SEEK_END:
            target = self.size + offset
        else:
            raise SeekRangeError("seek", self.name, f"invalid whence ({whence})")
        if target < 0 or target > self.size:
            raise SeekRangeError("seek", self.name, f"offset {target} out of range")
        self.offset = target
        return target

    def tell(self) -> int:
        """Return current cursor position."""
        return self.offset

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def writable(self) -> bool:
        return False

    def write(self, data: bytes) -> int:
        """Writing is not supported on a read-only file system."""
        raise io.UnsupportedOperation("write")

    def close(self) -> None:
        """Close is a no-op (no resources are held between reads)."""
        self._closed = True

    @property
    def closed(self) -> bool:
        """Return True if the file is closed."""
        return self._closed

    def __enter__(self) -> "BlobFile":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"BlobFile(name={self.name!r}, offset={self.offset}, size={self.size})"
