"""
Artifact store component - upload a rendered chart and sign a retrieval URL.

Key layout: {storage_prefix}{generated_id}{extension}

Invariants:
- generated_id comes from a random generator, never from content or time
- Objects are uploaded with a private ACL unless configured otherwise
- Upload failures are reported as [Forbidden] naming the bucket
- Signing happens only after a successful upload
"""

from __future__ import annotations

import logging

from chart_lambda.core.errors import SigningError, UploadError
from chart_lambda.core.ports.ids import IdGeneratorPort
from chart_lambda.core.ports.storage import ObjectStoragePort

from .models import SignedUrlResult, StoreArtifactInput, StoredObject

logger = logging.getLogger(__name__)


def build_key(storage_prefix: str, generated_id: str, extension: str) -> str:
    return f"{storage_prefix}{generated_id}{extension}"


async def upload(
    inp: StoreArtifactInput,
    storage: ObjectStoragePort,
    id_generator: IdGeneratorPort,
) -> StoredObject:
    """
    Upload the artifact under a freshly generated key.

    Raises:
        UploadError: the store rejected or failed the write
    """
    key = build_key(inp.storage_prefix, id_generator.generate(), inp.extension)
    try:
        await storage.put_object(
            inp.bucket,
            key,
            inp.artifact.body,
            content_type=inp.artifact.content_type,
            content_length=inp.artifact.content_length,
            acl=inp.acl,
        )
    except Exception as exc:
        logger.exception("Upload of %s to bucket %s failed", key, inp.bucket)
        raise UploadError(inp.bucket) from exc

    logger.info(
        "Stored chart s3://%s/%s (%d bytes)", inp.bucket, key, inp.artifact.content_length
    )
    return StoredObject(
        bucket=inp.bucket,
        key=key,
        content_type=inp.artifact.content_type,
        size_bytes=inp.artifact.content_length,
    )


def sign(stored: StoredObject, storage: ObjectStoragePort, expire_seconds: int) -> SignedUrlResult:
    """
    Compute a pre-signed retrieval URL. Local and synchronous.

    Raises:
        SigningError: the URL could not be computed
    """
    try:
        url = storage.presign_get(stored.bucket, stored.key, expire_seconds)
    except Exception as exc:
        logger.exception("Signing s3://%s/%s failed", stored.bucket, stored.key)
        raise SigningError(stored.bucket, stored.key) from exc

    logger.debug("Signed URL: %s", url)
    return SignedUrlResult(url=url, stored=stored, expire_seconds=expire_seconds)


async def run(
    inp: StoreArtifactInput,
    *,
    storage: ObjectStoragePort,
    id_generator: IdGeneratorPort,
) -> SignedUrlResult:
    """Upload then sign."""
    stored = await upload(inp, storage, id_generator)
    return sign(stored, storage, inp.expire_seconds)
