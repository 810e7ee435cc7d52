"""
Artifact store component models.
"""

from __future__ import annotations

from dataclasses import dataclass

from chart_lambda.components.render.models import RenderedArtifact


@dataclass(frozen=True)
class StoreArtifactInput:
    """Everything needed to persist one rendered chart."""

    artifact: RenderedArtifact
    bucket: str
    storage_prefix: str
    extension: str
    expire_seconds: int
    acl: str = "private"


@dataclass(frozen=True)
class StoredObject:
    """Durable record in the object store. Written once, never mutated."""

    bucket: str
    key: str
    content_type: str
    size_bytes: int


@dataclass(frozen=True)
class SignedUrlResult:
    """Time-boxed retrieval URL for a stored object. Never persisted."""

    url: str
    stored: StoredObject
    expire_seconds: int
