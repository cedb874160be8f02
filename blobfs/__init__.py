"""blobfs: Read-only file system view over blob storage buckets."""

from .base import ROOT, ZERO_TIME, Attributes, Bucket, BucketError, Entry, ListObject
from .blobdir import BlobDir
from .blobfile import BlobFile
from .config import (
    BucketConfig,
    LocalBucketConfig,
    MemoryBucketConfig,
    S3BucketConfig,
    connect_bucket,
    open_bucket,
)
from .errors import (
    BackendError,
    InvalidPathError,
    IsDirectoryError,
    NotDirectoryError,
    NotExistError,
    PathError,
    SeekRangeError,
)
from .filesystem import BlobFS
from .local import LocalBucket
from .memory import MemoryBucket
from .resolver import PathResolver, valid_path
from .s3 import S3Bucket

__all__ = [
    "Attributes",
    "BackendError",
    "BlobDir",
    "BlobFile",
    "BlobFS",
    "Bucket",
    "BucketConfig",
    "BucketError",
    "connect_bucket",
    "Entry",
    "InvalidPathError",
    "IsDirectoryError",
    "ListObject",
    "LocalBucket",
    "LocalBucketConfig",
    "MemoryBucket",
    "MemoryBucketConfig",
    "NotDirectoryError",
    "NotExistError",
    "open_bucket",
    "PathError",
    "PathResolver",
    "ROOT",
    "S3Bucket",
    "S3BucketConfig",
    "SeekRangeError",
    "valid_path",
    "ZERO_TIME",
]
