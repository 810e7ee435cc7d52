"""
Render component models.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO


class RenderStage(Enum):
    """Engine stages, in execution order."""

    INSTANTIATE = "instantiate"
    DRAW = "draw"
    ENCODE = "encode"
    STREAM = "stream"


@dataclass(frozen=True)
class RenderedArtifact:
    """
    Encoded image handed from the render pipeline to the artifact store.

    Lives only for one invocation; the body is read once by the upload.
    """

    body: BinaryIO
    content_length: int
    content_type: str
