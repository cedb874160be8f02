"""Configuration for bucket access.

Provides configuration dataclasses, the connect_bucket factory that builds
them from keyword arguments, and open_bucket that turns a configuration into
a live bucket.
"""

from dataclasses import dataclass, field
from typing import Any, Literal

from .base import Bucket


@dataclass
class MemoryBucketConfig:
    """Configuration for an in-memory bucket.

    Attributes:
        type: Always "memory".
        objects: Initial objects, keyed by object key.
    """

    type: Literal["memory"] = "memory"
    objects: dict[str, bytes] = field(default_factory=dict)


@dataclass
class LocalBucketConfig:
    """Configuration for a bucket backed by a local directory.

    Attributes:
        type: Always "local".
        root: Path to the directory holding the objects.
    """

    type: Literal["local"] = "local"
    root: str = ""


@dataclass
class S3BucketConfig:
    """Configuration for an S3 bucket.

    Attributes:
        type: Always "s3".
        bucket: Bucket name.
        prefix: Key prefix the file system is rooted at (default: "").
        region_name: AWS region (default: boto3's own resolution).
        endpoint_url: Custom endpoint for S3-compatible services.
    """

    type: Literal["s3"] = "s3"
    bucket: str = ""
    prefix: str = ""
    region_name: str | None = None
    endpoint_url: str | None = None


# Type alias for all bucket configs
BucketConfig = MemoryBucketConfig | LocalBucketConfig | S3BucketConfig


def connect_bucket(
    type: Literal["memory", "local", "s3"] = "memory",
    **kwargs,
) -> BucketConfig:
    """Configure bucket access.

    Args:
        type: Bucket type.
            - "memory": In-memory bucket, optionally seeded with ``objects``.
            - "local": Objects are files under a directory.
                       Requires 'root' argument.
            - "s3": Objects live in an S3 bucket.
                    Requires 'bucket' argument.
        **kwargs: Additional configuration for the bucket type.
            For type="local":
                - root (str): Required. Directory holding the objects.
            For type="s3":
                - bucket (str): Required. Bucket name.
                - prefix (str): Optional. Key prefix to root the tree at.
                - region_name (str): Optional.
                - endpoint_url (str): Optional.

    Returns:
        BucketConfig for open_bucket() or BlobFS.from_config().

    Examples:
        >>> connect_bucket(type="memory")
        MemoryBucketConfig(type='memory', objects={})

        >>> connect_bucket(type="local", root="/srv/data")
        LocalBucketConfig(type='local', root='/srv/data')
    """
    if type == "memory":
        objects = kwargs.pop("objects", {})
        if kwargs:
            raise ValueError(
                f"Unexpected arguments for memory bucket: {list(kwargs.keys())}"
            )
        return MemoryBucketConfig(objects=dict(objects))

    elif type == "local":
        root = kwargs.pop("root", "")
        if kwargs:
            raise ValueError(
                f"Unexpected arguments for local bucket: {list(kwargs.keys())}"
            )
        if not root:
            raise ValueError("Local bucket requires 'root' parameter")
        return LocalBucketConfig(root=str(root))

    elif type == "s3":
        bucket = kwargs.pop("bucket", "")
        prefix = kwargs.pop("prefix", "")
        region_name = kwargs.pop("region_name", None)
        endpoint_url = kwargs.pop("endpoint_url", None)
        if kwargs:
            raise ValueError(
                f"Unexpected arguments for s3 bucket: {list(kwargs.keys())}"
            )
        if not bucket:
            raise ValueError("S3 bucket requires 'bucket' parameter")
        return S3BucketConfig(
            bucket=bucket,
            prefix=prefix,
            region_name=region_name,
            endpoint_url=endpoint_url,
        )

    else:
        raise ValueError(
            f"Unsupported bucket type: {type}. Use 'memory', 'local' or 's3'."
        )


def open_bucket(config: BucketConfig, **overrides: Any) -> Bucket:
    """Create the bucket described by ``config``.

    Args:
        config: Configuration from connect_bucket() or built directly.
        **overrides: Passed through to the bucket constructor (for example a
            pre-built ``client`` for S3).
    """
    if isinstance(config, MemoryBucketConfig):
        from .memory import MemoryBucket

        return MemoryBucket(config.objects, **overrides)

    if isinstance(config, LocalBucketConfig):
        from .local import LocalBucket

        return LocalBucket(config.root, **overrides)

    if isinstance(config, S3BucketConfig):
        from .s3 import S3Bucket

        client_kwargs = {}
        if config.region_name:
            client_kwargs["region_name"] = config.region_name
        if config.endpoint_url:
            client_kwargs["endpoint_url"] = config.endpoint_url
        return S3Bucket(
            config.bucket, prefix=config.prefix, **client_kwargs, **overrides
        )

    raise ValueError(f"Unsupported bucket config: {config!r}")
