"""
Artifact store component - object upload and pre-signed URL generation.
"""

from .component import build_key, run, sign, upload
from .models import SignedUrlResult, StoreArtifactInput, StoredObject

__all__ = [
    # Component
    "run",
    "upload",
    "sign",
    "build_key",
    # Models
    "StoreArtifactInput",
    "StoredObject",
    "SignedUrlResult",
]
