"""Base bucket interface and dataclasses.

Defines the capability a blob storage backend provides (``Bucket``) and the
``Entry`` value that describes a resolved file or synthetic directory.
"""

from __future__ import annotations

import os
import stat as stat_mod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import BinaryIO, Iterator, Protocol, runtime_checkable

SEPARATOR = "/"

# Modification time reported for entries with no stored object (the root).
ZERO_TIME = datetime.min.replace(tzinfo=timezone.utc)


class BucketError(OSError):
    """A bucket call failed for a reason other than a missing key."""


@dataclass(frozen=True)
class Attributes:
    """Attributes of a single stored object.

    Attributes:
        size: Object size in bytes.
        mod_time: Last modification time (UTC).
        content_hash: Hex digest or ETag of the content, if the bucket has one.
    """

    size: int
    mod_time: datetime
    content_hash: str | None = None


@dataclass(frozen=True)
class ListObject:
    """One item yielded by a delimiter listing.

    Attributes:
        key: Object key, or a common prefix ending in the delimiter
            when ``is_dir`` is True.
        size: Object size in bytes (0 for prefixes).
        mod_time: Last modification time (``ZERO_TIME`` for prefixes).
        content_hash: Hex digest or ETag of the content, if known.
        is_dir: True if this item is a common prefix rather than an object.
    """

    key: str
    size: int = 0
    mod_time: datetime = ZERO_TIME
    content_hash: str | None = None
    is_dir: bool = False


@dataclass(frozen=True)
class Entry:
    """A resolved path: either a stored object or a synthetic directory.

    ``key`` never carries a trailing separator; the empty key is the root.
    Directories have no stored object of their own, so their ``size`` and
    ``mod_time`` carry no meaning.

    Attributes:
        key: Full key of the object or directory prefix, without trailing "/".
        size: Object size in bytes (0 for directories).
        mod_time: Last modification time (UTC).
        is_dir: True for synthetic directories.
        content_hash: Hex digest or ETag of the content, if known.
    """

    key: str
    size: int = 0
    mod_time: datetime = ZERO_TIME
    is_dir: bool = False
    content_hash: str | None = None

    def __post_init__(self) -> None:
        if self.key.endswith(SEPARATOR):
            object.__setattr__(self, "key", self.key.rstrip(SEPARATOR))

    @classmethod
    def from_list_object(cls, obj: ListObject) -> Entry:
        return cls(
            key=obj.key,
            size=obj.size,
            mod_time=obj.mod_time,
            is_dir=obj.is_dir,
            content_hash=obj.content_hash,
        )

    @property
    def name(self) -> str:
        """Final path segment, or "." for the root."""
        if not self.key:
            return "."
        return self.key.rsplit(SEPARATOR, 1)[-1]

    @property
    def path(self) -> str:
        return self.key

    @property
    def mode(self) -> int:
        """Fixed read-only mode: r-x for directories, r-- for files."""
        if self.is_dir:
            return stat_mod.S_IFDIR | 0o555
        return stat_mod.S_IFREG | 0o444

    # os.stat_result-compatible properties, so an Entry can stand in for
    # the result of os.stat() in code that only reads st_* fields.

    @property
    def st_size(self) -> int:
        return self.size

    @property
    def st_mode(self) -> int:
        return self.mode

    @property
    def st_ino(self) -> int:
        return 0

    @property
    def st_dev(self) -> int:
        return 0

    @property
    def st_nlink(self) -> int:
        return 2 if self.is_dir else 1

    @property
    def st_uid(self) -> int:
        return os.getuid() if hasattr(os, "getuid") else 0

    @property
    def st_gid(self) -> int:
        return os.getgid() if hasattr(os, "getgid") else 0

    @property
    def st_mtime(self) -> float:
        if self.mod_time == ZERO_TIME:
            return 0.0
        return self.mod_time.timestamp()

    @property
    def st_atime(self) -> float:
        return self.st_mtime

    @property
    def st_ctime(self) -> float:
        return self.st_mtime

    def stat(self) -> os.stat_result:
        """Return the entry as an ``os.stat_result``."""
        return os.stat_result(
            (
                self.st_mode,
                self.st_ino,
                self.st_dev,
                self.st_nlink,
                self.st_uid,
                self.st_gid,
                self.st_size,
                self.st_atime,
                self.st_mtime,
                self.st_ctime,
            )
        )


# The synthetic root: always a directory, never backed by a stored object.
ROOT = Entry(key="", size=0, mod_time=ZERO_TIME, is_dir=True)


@runtime_checkable
class Bucket(Protocol):
    """Minimal blob storage capability consumed by ``BlobFS``.

    Implementations raise ``FileNotFoundError`` when a key does not exist and
    ``BucketError`` for every other failure.
    """

    def list(self, prefix: str = "", delimiter: str = SEPARATOR) -> Iterator[ListObject]:
        """Lazily list keys under ``prefix``, folding keys at ``delimiter``.

        Keys containing the delimiter after the prefix are reported once as a
        common prefix (``is_dir=True``, key ending in the delimiter). Each call
        starts a fresh listing.
        """
        ...

    def attributes(self, key: str) -> Attributes:
        """Fetch the attributes of the object stored at ``key``."""
        ...

    def range_read(self, key: str, offset: int, length: int) -> BinaryIO:
        """Open a stream over ``length`` bytes of ``key`` starting at ``offset``.

        A negative ``length`` reads to the end of the object.
        """
        ...
