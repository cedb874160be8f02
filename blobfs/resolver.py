"""Path resolution from file-system paths to bucket keys.

A bucket has no directories, only keys that happen to share a prefix. The
resolver decides whether a path names the root, a stored object, or a
virtual directory inferred from the keys below it.
"""

from __future__ import annotations

import logging

from .base import ROOT, SEPARATOR, Bucket, Entry
from .errors import InvalidPathError, NotExistError

logger = logging.getLogger(__name__)


def valid_path(path: str) -> bool:
    """Report whether ``path`` is a valid file-system path.

    Valid paths are relative and slash separated, with no empty, "." or ".."
    segments and no leading or trailing slash. The single dot names the root.

    Examples:
        >>> valid_path("dir1/hoge.txt")
        True
        >>> valid_path(".")
        True
        >>> valid_path("../x")
        False
        >>> valid_path("/abs")
        False
    """
    if path == ".":
        return True
    if not path:
        return False
    for segment in path.split(SEPARATOR):
        if segment in ("", ".", ".."):
            return False
    return True


class PathResolver:
    """Resolves paths to entries using one or two bucket calls.

    The attribute lookup runs first, so opening a known file costs a single
    round trip; directories cost a second one for the listing probe.
    """

    def __init__(self, bucket: Bucket):
        self.bucket = bucket

    def lookup(self, path: str, op: str = "open") -> Entry:
        """Resolve ``path`` to an ``Entry``.

        Args:
            path: File-system path to resolve.
            op: Operation name recorded on raised errors.

        Returns:
            ``ROOT`` for ".", a file entry for a stored object, otherwise a
            directory entry when keys exist below ``path``.

        Raises:
            InvalidPathError: If ``path`` is not a valid path.
            NotExistError: If nothing is stored at or below ``path``.
            BucketError: If a bucket call fails.
        """
        if not valid_path(path):
            raise InvalidPathError(op, path)
        if path == ".":
            return ROOT

        try:
            attrs = self.bucket.attributes(path)
        except FileNotFoundError:
            logger.debug("No object at %r, probing for a directory", path)
            return self._probe_dir(path, op)

        return Entry(
            key=path,
            size=attrs.size,
            mod_time=attrs.mod_time,
            is_dir=False,
            content_hash=attrs.content_hash,
        )

    def _probe_dir(self, path: str, op: str) -> Entry:
        """Check whether any key lives below ``path``.

        Only the first listing item is inspected. Listing under ``path + "/"``
        keeps sibling keys such as ``dir1-x.txt`` from masking ``dir1/``.
        """
        prefix = path + SEPARATOR
        first = next(iter(self.bucket.list(prefix, SEPARATOR)), None)
        if first is None or not first.key.startswith(prefix):
            raise NotExistError(op, path)
        return Entry(key=path, is_dir=True)
