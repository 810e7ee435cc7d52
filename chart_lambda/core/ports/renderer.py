"""
Rendering engine port.

A rendering surface is a stateful drawing context sized to (width, height)
that holds native resources. Each stage suspends until the engine reports
completion; the surface must be destroyed on every exit path.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, BinaryIO, Protocol


@dataclass(frozen=True)
class ImageStream:
    """Readable stream view of encoded image content."""

    stream: BinaryIO
    length: int


class RenderingSurfacePort(Protocol):
    """A single rendering surface owned by one invocation."""

    async def draw_chart(self, spec: dict[str, Any]) -> None:
        """Draw the chart. Raises on any drawing failure."""
        ...

    async def get_image_buffer(self, content_type: str) -> bytes:
        """Encode the drawn chart as content_type and return the bytes."""
        ...

    async def get_image_stream(self, content_type: str) -> ImageStream:
        """Return a stream over the encoded content plus its byte length."""
        ...

    def destroy(self) -> None:
        """Release native resources. Must be safe to call more than once."""
        ...


class SurfaceFactoryPort(Protocol):
    def create(self, width: int, height: int) -> RenderingSurfacePort:
        """Instantiate a new surface. Raises if resources are unavailable."""
        ...
