"""Bucket backed by a local directory tree.

Each regular file under the root is an object whose key is its path relative
to the root, with "/" separators. Empty directories hold no keys and are
therefore invisible, as in any blob store.
"""

from __future__ import annotations

import errno
import io
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, Iterator

from .base import SEPARATOR, Attributes, BucketError, ListObject


class LocalBucket:
    """Bucket interface restricted to a root directory.

    All keys are validated to ensure they stay within the configured root
    directory; keys that escape it (``../``, absolute paths, symlinks
    pointing outside) are rejected with ``PermissionError``.
    """

    def __init__(self, root: str | os.PathLike[str]):
        """Initialize the bucket.

        Args:
            root: Path to an existing directory.

        Raises:
            ValueError: If root doesn't exist or is not a directory.
        """
        root_path = Path(root)
        if not root_path.exists():
            raise ValueError(f"Root does not exist: {root}")
        self.root = root_path.resolve()
        if not self.root.is_dir():
            raise ValueError(f"Root must be a directory: {root}")

    def _validate_key(self, key: str) -> Path:
        """Resolve ``key`` to a path inside root.

        Raises:
            PermissionError: If the key escapes the root directory.
        """
        resolved = (self.root / key.lstrip(SEPARATOR)).resolve()
        try:
            resolved.relative_to(self.root)
        except ValueError:
            raise PermissionError(
                errno.EACCES, f"Key outside root: {resolved} (root: {self.root})", key
            )
        return resolved

    def _file(self, key: str) -> Path:
        path = self._validate_key(key)
        if not key or key.endswith(SEPARATOR) or not path.is_file():
            raise FileNotFoundError(errno.ENOENT, "No such key", key)
        return path

    def _keys(self, prefix: str) -> list[str]:
        """All keys under the deepest directory named by ``prefix``."""
        base = prefix.rpartition(SEPARATOR)[0]
        start = self._validate_key(base)
        if not start.is_dir():
            return []
        keys = []
        for dirpath, _dirnames, filenames in os.walk(start):
            for filename in filenames:
                rel = Path(dirpath, filename).relative_to(self.root)
                key = rel.as_posix()
                if key.startswith(prefix):
                    keys.append(key)
        return sorted(keys)

    @staticmethod
    def _mod_time(st: os.stat_result) -> datetime:
        return datetime.fromtimestamp(st.st_mtime, tz=timezone.utc)

    def list(self, prefix: str = "", delimiter: str = SEPARATOR) -> Iterator[ListObject]:
        """List keys under ``prefix`` in sorted order, folding at ``delimiter``."""
        try:
            keys = self._keys(prefix)
        except PermissionError:
            raise
        except OSError as exc:
            raise BucketError(exc.errno, f"Listing {prefix!r} failed: {exc}") from exc

        seen: set[str] = set()
        for key in keys:
            rest = key[len(prefix):]
            if delimiter and delimiter in rest:
                common = prefix + rest[: rest.index(delimiter) + len(delimiter)]
                if common in seen:
                    continue
                seen.add(common)
                yield ListObject(key=common, is_dir=True)
                continue
            st = (self.root / key).stat()
            yield ListObject(key=key, size=st.st_size, mod_time=self._mod_time(st))

    def attributes(self, key: str) -> Attributes:
        path = self._file(key)
        st = path.stat()
        return Attributes(size=st.st_size, mod_time=self._mod_time(st))

    def range_read(self, key: str, offset: int, length: int) -> BinaryIO:
        path = self._file(key)
        with path.open("rb") as f:
            f.seek(offset)
            data = f.read() if length < 0 else f.read(length)
        return io.BytesIO(data)
