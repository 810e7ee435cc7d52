"""
Render component - drives the rendering engine through its stages.

Stages run strictly in order, each awaited with a timeout:
instantiate -> draw -> encode -> stream.

Invariants:
- At most one render attempt per session; nothing is retried
- The surface is destroyed on every exit path, after the caller's work
  inside the session (the upload) has finished
- Every engine failure leaves this module as a RenderError naming the stage
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from types import TracebackType
from typing import Any, TypeVar

from chart_lambda.core.errors import (
    DrawError,
    RenderError,
    RenderResourceError,
    RenderTimeoutError,
)
from chart_lambda.core.ports.renderer import (
    ImageStream,
    RenderingSurfacePort,
    SurfaceFactoryPort,
)

from .models import RenderedArtifact, RenderStage

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_STAGE_TIMEOUT_SECONDS = 30.0

# Resource named in the error raised when each stage fails
STAGE_RESOURCES: dict[RenderStage, str] = {
    RenderStage.INSTANTIATE: "Canvas",
    RenderStage.ENCODE: "ImageBuffer",
    RenderStage.STREAM: "ImageStream",
}


def stage_error(stage: RenderStage) -> RenderError:
    """Map a failed stage to its typed error."""
    if stage is RenderStage.DRAW:
        return DrawError()
    return RenderResourceError(STAGE_RESOURCES[stage], stage=stage.value)


class RenderSession:
    """
    Scoped ownership of one rendering surface.

    Usage:
        async with RenderSession(factory, width, height) as session:
            artifact = await session.render(spec, "image/png")
            await upload(artifact)
        # surface destroyed here, on success or failure
    """

    def __init__(
        self,
        factory: SurfaceFactoryPort,
        width: int,
        height: int,
        *,
        stage_timeout: float = DEFAULT_STAGE_TIMEOUT_SECONDS,
    ) -> None:
        self._factory = factory
        self._width = width
        self._height = height
        self._timeout = stage_timeout
        self._surface: RenderingSurfacePort | None = None
        self._rendered = False
        self.completed: list[RenderStage] = []

    async def __aenter__(self) -> RenderSession:
        self._surface = self._instantiate()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _instantiate(self) -> RenderingSurfacePort:
        try:
            surface = self._factory.create(self._width, self._height)
        except Exception as exc:
            logger.exception("Rendering surface could not be created")
            raise stage_error(RenderStage.INSTANTIATE) from exc
        self.completed.append(RenderStage.INSTANTIATE)
        return surface

    def close(self) -> None:
        """Destroy the surface. Idempotent; never masks the original error."""
        surface, self._surface = self._surface, None
        if surface is None:
            return
        try:
            surface.destroy()
        except Exception:
            logger.exception("Failed to release rendering surface")

    async def _stage(self, stage: RenderStage, step: Awaitable[T]) -> T:
        logger.debug("Render stage %s started", stage.value)
        try:
            result = await asyncio.wait_for(step, timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            logger.error("Render stage %s timed out after %ss", stage.value, self._timeout)
            raise RenderTimeoutError(stage.value, self._timeout) from exc
        except Exception as exc:
            logger.exception("Render stage %s failed", stage.value)
            raise stage_error(stage) from exc
        self.completed.append(stage)
        logger.debug("Render stage %s finished", stage.value)
        return result

    async def render(self, spec: dict[str, Any], content_type: str) -> RenderedArtifact:
        """Run draw -> encode -> stream and return the encoded artifact."""
        if self._surface is None:
            raise RuntimeError("RenderSession must be entered before rendering")
        if self._rendered:
            raise RuntimeError("RenderSession renders at most once")
        self._rendered = True

        surface = self._surface
        await self._stage(RenderStage.DRAW, surface.draw_chart(spec))
        buffer = await self._stage(RenderStage.ENCODE, surface.get_image_buffer(content_type))
        image: ImageStream = await self._stage(
            RenderStage.STREAM, surface.get_image_stream(content_type)
        )

        logger.debug(
            "Encoded %s: buffer %d bytes, stream %d bytes",
            content_type,
            len(buffer),
            image.length,
        )
        return RenderedArtifact(
            body=image.stream,
            content_length=image.length,
            content_type=content_type,
        )
