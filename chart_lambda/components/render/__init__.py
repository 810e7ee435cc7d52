"""
Render component - staged rendering with scoped surface ownership.
"""

from .component import (
    DEFAULT_STAGE_TIMEOUT_SECONDS,
    STAGE_RESOURCES,
    RenderSession,
    stage_error,
)
from .models import RenderedArtifact, RenderStage

__all__ = [
    "RenderSession",
    "stage_error",
    "DEFAULT_STAGE_TIMEOUT_SECONDS",
    "STAGE_RESOURCES",
    "RenderedArtifact",
    "RenderStage",
]
