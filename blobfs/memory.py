"""In-memory bucket implementation."""

from __future__ import annotations

import errno as _errno
import hashlib
from datetime import datetime, timezone
from io import BytesIO
from typing import BinaryIO, Iterator

from .base import SEPARATOR, Attributes, ListObject


class MemoryBucket:
    """Simple in-memory bucket.

    Stores objects as ``bytes`` in a plain dict keyed by object key, with
    the modification time of each put alongside. Implements the ``Bucket``
    protocol so it works with ``BlobFS`` directly.

    Useful for testing and for serving small trees built in-process.
    """

    def __init__(self, objects: dict[str, bytes] | None = None) -> None:
        self.objects: dict[str, bytes] = {}
        self.mod_times: dict[str, datetime] = {}
        for key, data in (objects or {}).items():
            self.put(key, data)

    def put(self, key: str, data: bytes, mod_time: datetime | None = None) -> None:
        if not isinstance(data, bytes):
            raise TypeError(f"Expected bytes, got {type(data).__name__}")
        self.objects[key] = data
        self.mod_times[key] = mod_time or datetime.now(timezone.utc)

    def delete(self, key: str) -> None:
        if key not in self.objects:
            raise FileNotFoundError(_errno.ENOENT, "No such key", key)
        del self.objects[key]
        del self.mod_times[key]

    def _hash(self, key: str) -> str:
        return hashlib.md5(self.objects[key]).hexdigest()

    def list(self, prefix: str = "", delimiter: str = SEPARATOR) -> Iterator[ListObject]:
        """List keys under ``prefix`` in sorted order, folding at ``delimiter``."""
        seen: set[str] = set()
        for key in sorted(self.objects):
            if not key.startswith(prefix):
                continue
            rest = key[len(prefix):]
            if delimiter and delimiter in rest:
                common = prefix + rest[: rest.index(delimiter) + len(delimiter)]
                if common in seen:
                    continue
                seen.add(common)
                yield ListObject(key=common, is_dir=True)
                continue
            yield ListObject(
                key=key,
                size=len(self.objects[key]),
                mod_time=self.mod_times[key],
                content_hash=self._hash(key),
            )

    def attributes(self, key: str) -> Attributes:
        if key not in self.objects:
            raise FileNotFoundError(_errno.ENOENT, "No such key", key)
        return Attributes(
            size=len(self.objects[key]),
            mod_time=self.mod_times[key],
            content_hash=self._hash(key),
        )

    def range_read(self, key: str, offset: int, length: int) -> BinaryIO:
        if key not in self.objects:
            raise FileNotFoundError(_errno.ENOENT, "No such key", key)
        data = self.objects[key]
        end = len(data) if length < 0 else offset + length
        return BytesIO(data[offset:end])
