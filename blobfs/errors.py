"""Path-scoped errors raised by BlobFS.

Each error records the operation that failed (``open``, ``read``, ``seek``,
``stat``) alongside the path, and mixes in the builtin exception a caller
would expect from the standard library, so ``except FileNotFoundError`` and
friends keep working.
"""

from __future__ import annotations

import errno


class PathError(OSError):
    """An operation on a path failed.

    Attributes:
        op: Name of the failed operation.
        path: Path the operation was applied to.
        reason: Human readable cause.
    """

    default_errno = errno.EIO

    def __init__(self, op: str, path: str, reason: str, code: int | None = None):
        super().__init__(self.default_errno if code is None else code, reason, path)
        self.op = op
        self.path = path
        self.reason = reason

    def __str__(self) -> str:
        return f"{self.op} {self.path}: {self.reason}"

    def __reduce__(self):
        return (type(self), (self.op, self.path, self.reason, self.errno))


class InvalidPathError(PathError, ValueError):
    """Path is not a valid relative, slash-separated path."""

    default_errno = errno.EINVAL

    def __init__(self, op: str, path: str, reason: str = "invalid argument", code: int | None = None):
        super().__init__(op, path, reason, code)


class NotExistError(PathError, FileNotFoundError):
    """Neither an object nor a directory exists at the path."""

    default_errno = errno.ENOENT

    def __init__(self, op: str, path: str, reason: str = "file does not exist", code: int | None = None):
        super().__init__(op, path, reason, code)


class IsDirectoryError(PathError, IsADirectoryError):
    """A file operation was applied to a directory."""

    default_errno = errno.EISDIR

    def __init__(self, op: str, path: str, reason: str = "is a directory", code: int | None = None):
        super().__init__(op, path, reason, code)


class NotDirectoryError(PathError, NotADirectoryError):
    """A directory operation was applied to a file."""

    default_errno = errno.ENOTDIR

    def __init__(self, op: str, path: str, reason: str = "not a directory", code: int | None = None):
        super().__init__(op, path, reason, code)


class SeekRangeError(PathError, ValueError):
    """Seek reference point is unknown or the target lies outside the file."""

    default_errno = errno.EINVAL

    def __init__(self, op: str, path: str, reason: str = "invalid argument", code: int | None = None):
        super().__init__(op, path, reason, code)


class BackendError(PathError):
    """The bucket failed; the original error is chained as ``__cause__``."""

    @classmethod
    def wrap(cls, op: str, path: str, exc: BaseException) -> BackendError:
        code = getattr(exc, "errno", None)
        return cls(op, path, str(exc) or type(exc).__name__, code)
