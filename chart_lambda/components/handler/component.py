"""
Handler component - the chart invocation pipeline and its single exit point.

Validate -> Normalize -> Instantiate -> Draw -> Encode -> Stream -> Upload
-> Sign -> Respond, strictly in that order, one artifact per invocation.

Invariants:
- Exactly one terminal outcome per invocation, never both url and error
- A failure short-circuits every later stage
- The rendering surface is released after upload and signing, or as soon
  as any stage fails
- Missing configuration is reported before any rendering or storage call
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from chart_lambda.components import artifact_store, request
from chart_lambda.components.render import RenderSession
from chart_lambda.core.errors import BAD_REQUEST, ChartError, UnexpectedError
from chart_lambda.core.ports.ids import IdGeneratorPort
from chart_lambda.core.ports.renderer import SurfaceFactoryPort
from chart_lambda.core.ports.storage import ObjectStoragePort
from chart_lambda.rules.models import ChartRules

from .models import ChartResult, ResultCallback

logger = logging.getLogger(__name__)


class ChartHandler:
    """
    Render-persist-sign pipeline.

    Collaborators are injected once at construction and shared read-only
    across invocations; every invocation owns its own rendering surface.
    """

    def __init__(
        self,
        *,
        bucket: str | None,
        rules: ChartRules,
        surface_factory: SurfaceFactoryPort,
        storage: ObjectStoragePort,
        id_generator: IdGeneratorPort,
    ) -> None:
        self.bucket = bucket
        self.rules = rules
        self.surface_factory = surface_factory
        self.storage = storage
        self.id_generator = id_generator

    async def _process(self, event: Any) -> str:
        chart_request = request.run(event, bucket=self.bucket, rules=self.rules)

        async with RenderSession(
            self.surface_factory,
            chart_request.width,
            chart_request.height,
            stage_timeout=self.rules.render.stage_timeout_seconds,
        ) as session:
            artifact = await session.render(chart_request.chart_spec, chart_request.content_type)
            signed = await artifact_store.run(
                artifact_store.StoreArtifactInput(
                    artifact=artifact,
                    bucket=chart_request.bucket,
                    storage_prefix=chart_request.storage_prefix,
                    extension=chart_request.extension,
                    expire_seconds=chart_request.expire_seconds,
                    acl=self.rules.storage.acl,
                ),
                storage=self.storage,
                id_generator=self.id_generator,
            )
        return signed.url

    async def run(self, event: Any) -> ChartResult:
        """Process one invocation and return its tagged outcome."""
        try:
            url = await self._process(event)
        except ChartError as err:
            if err.prefix == BAD_REQUEST:
                logger.warning("Rejected chart request: %s", err)
            else:
                logger.error("Chart request failed: %s", err)
            return ChartResult.failure(err)
        except Exception:
            logger.exception("Unhandled failure in chart pipeline")
            return ChartResult.failure(UnexpectedError())
        return ChartResult.success(url)

    def invoke(self, event: Any) -> ChartResult:
        """Synchronous entry point for hosts without a running event loop."""
        return asyncio.run(self.run(event))

    def handle(self, event: Any, callback: ResultCallback) -> None:
        """Callback form: callback(None, url) or callback(error, None), once."""
        result = self.invoke(event)
        callback(*result.as_callback_args())
