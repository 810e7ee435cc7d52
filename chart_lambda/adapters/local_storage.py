"""
Filesystem object storage for local runs and integration tests.

Each bucket is a directory under base_path. An object is written next to a
JSON sidecar holding its content type, ACL and checksum, so local runs can
be inspected the way an S3 console would show them.

Invariants:
- Keys are write-once; a second put to the same key fails
- Keys resolve inside their bucket directory
"""

from __future__ import annotations

import asyncio
import hashlib
import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import BinaryIO
from urllib.parse import urlencode

from chart_lambda.core.ports.storage import KeyExistsError, KeyNotFoundError, ObjectStoreError

SIDECAR_SUFFIX = ".meta.json"
STORAGE_PATH_ENV = "CHART_LOCAL_STORAGE_PATH"


@dataclass(frozen=True)
class LocalObject:
    bucket: str
    key: str
    size_bytes: int
    content_type: str
    acl: str
    sha256: str


def sidecar_for(path: Path) -> Path:
    return path.with_name(path.name + SIDECAR_SUFFIX)


class LocalObjectStorage:
    """ObjectStoragePort backed by {base_path}/{bucket}/{key}."""

    def __init__(self, base_path: str | Path) -> None:
        self.base_path = Path(base_path).resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)

    def object_path(self, bucket: str, key: str) -> Path:
        bucket_root = (self.base_path / bucket).resolve()
        path = bucket_root.joinpath(*key.split("/")).resolve()
        if bucket_root not in path.parents:
            raise ObjectStoreError(f"Key '{key}' resolves outside bucket '{bucket}'")
        return path

    def put_object_sync(
        self,
        bucket: str,
        key: str,
        body: BinaryIO,
        *,
        content_type: str,
        content_length: int,
        acl: str = "private",
    ) -> LocalObject:
        path = self.object_path(bucket, key)
        payload = body.read()
        if len(payload) != content_length:
            raise ObjectStoreError(
                f"Declared length {content_length} does not match body length {len(payload)}"
            )

        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            # "x" refuses to open an existing file
            with path.open("xb") as f:
                f.write(payload)
        except FileExistsError as exc:
            raise KeyExistsError(bucket, key) from exc

        stored = LocalObject(
            bucket=bucket,
            key=key,
            size_bytes=len(payload),
            content_type=content_type,
            acl=acl,
            sha256=hashlib.sha256(payload).hexdigest(),
        )
        sidecar_for(path).write_text(json.dumps(asdict(stored)))
        return stored

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
        await asyncio.to_thread(
            self.put_object_sync,
            bucket,
            key,
            body,
            content_type=content_type,
            content_length=content_length,
            acl=acl,
        )

    def presign_get(self, bucket: str, key: str, expire_seconds: int) -> str:
        # Expiry is not enforced on disk; it is carried to mirror S3 URLs
        path = self.object_path(bucket, key)
        if not path.is_file():
            raise KeyNotFoundError(bucket, key)
        return f"{path.as_uri()}?{urlencode({'X-Amz-Expires': expire_seconds})}"

    def get(self, bucket: str, key: str) -> tuple[bytes, LocalObject]:
        path = self.object_path(bucket, key)
        if not path.is_file():
            raise KeyNotFoundError(bucket, key)
        meta = json.loads(sidecar_for(path).read_text())
        return path.read_bytes(), LocalObject(**meta)

    def list_keys(self, bucket: str) -> list[str]:
        """Stored keys in a bucket, sidecars excluded."""
        bucket_root = self.base_path / bucket
        if not bucket_root.is_dir():
            return []
        keys = []
        for path in bucket_root.rglob("*"):
            if path.is_file() and not path.name.endswith(SIDECAR_SUFFIX):
                keys.append(path.relative_to(bucket_root).as_posix())
        return sorted(keys)


def create_local_storage(base_path: str | Path | None = None) -> LocalObjectStorage:
    """Storage rooted at base_path, else $CHART_LOCAL_STORAGE_PATH, else ./storage."""
    if base_path is None:
        base_path = os.environ.get(STORAGE_PATH_ENV, "./storage")
    return LocalObjectStorage(base_path)
