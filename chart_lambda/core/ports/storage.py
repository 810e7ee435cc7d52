"""
Object storage port.

Implementations: S3 (boto3), local filesystem (development and tests).

Invariants:
- Objects are written once and never mutated by this system
- Signing is local and synchronous; it performs no network call
"""

from __future__ import annotations

from typing import BinaryIO, Protocol


class ObjectStoragePort(Protocol):
    """Object storage interface used by the artifact store."""

    async def put_object(
        self,
        bucket: str,
        key: str,
        body: BinaryIO,
        *,
        content_type: str,
        content_length: int,
        acl: str = "private",
    ) -> None:
        """
        Upload body under (bucket, key).

        Raises:
            Any exception on permission or availability problems.
        """
        ...

    def presign_get(self, bucket: str, key: str, expire_seconds: int) -> str:
        """Compute a time-boxed retrieval URL for (bucket, key)."""
        ...


class ObjectStoreError(Exception):
    """Base class for adapter-level storage errors."""


class KeyExistsError(ObjectStoreError):
    """Raised when attempting to write to an existing key (immutability violation)."""

    def __init__(self, bucket: str, key: str) -> None:
        self.bucket = bucket
        self.key = key
        super().__init__(f"Key already exists (immutable): {bucket}/{key}")


class KeyNotFoundError(ObjectStoreError):
    """Raised when key doesn't exist."""

    def __init__(self, bucket: str, key: str) -> None:
        self.bucket = bucket
        self.key = key
        super().__init__(f"Key not found: {bucket}/{key}")
