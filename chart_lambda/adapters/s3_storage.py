"""
S3 Object Storage Adapter.

Implements ObjectStoragePort with boto3. Uploads run in a worker thread so
the invocation's event loop stays responsive; URL signing is local and
needs no network round trip.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, BinaryIO

import boto3
from botocore.config import Config

logger = logging.getLogger(__name__)


class S3ObjectStorage:
    """boto3-backed implementation of ObjectStoragePort."""

    def __init__(self, client: Any) -> None:
        self.client = client

    def put_object_sync(
        self,
        bucket: str,
        key: str,
        body: BinaryIO,
        *,
        content_type: str,
        content_length: int,
        acl: str = "private",
    ) -> None:
        self.client.put_object(
            Bucket=bucket,
            Key=key,
            Body=body,
            ContentType=content_type,
            ContentLength=content_length,
            ACL=acl,
        )

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
        url: str = self.client.generate_presigned_url(
            "get_object",
            Params={"Bucket": bucket, "Key": key},
            ExpiresIn=expire_seconds,
        )
        return url


def create_s3_storage(region_name: str | None = None) -> S3ObjectStorage:
    """
    Factory function to create S3ObjectStorage from config.

    Uses SigV4 so pre-signed URLs honour expiries up to seven days.
    Built once per process and reused across invocations.
    """
    client = boto3.client(
        "s3",
        region_name=region_name,
        config=Config(signature_version="s3v4"),
    )
    logger.debug("S3 client created for region %s", client.meta.region_name)
    return S3ObjectStorage(client)
