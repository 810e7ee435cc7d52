from __future__ import annotations

import logging

from chart_lambda.adapters.ids import ShortIdGenerator
from chart_lambda.adapters.render.mpl_renderer import MatplotlibSurfaceFactory
from chart_lambda.adapters.s3_storage import create_s3_storage
from chart_lambda.app_shell.config import HandlerSettings
from chart_lambda.components.handler import ChartHandler
from chart_lambda.core.ports.storage import ObjectStoragePort
from chart_lambda.rules.loader import load_rules_or_default

logger = logging.getLogger(__name__)


def create_handler(
    settings: HandlerSettings,
    *,
    storage: ObjectStoragePort | None = None,
) -> ChartHandler:
    """Wire adapters into a ChartHandler. Called once per process."""
    rules = load_rules_or_default(settings.rules_path)
    logger.info("Rules loaded from %s", settings.rules_path)

    if storage is None:
        storage = create_s3_storage(settings.aws_region)

    return ChartHandler(
        bucket=settings.s3_bucket,
        rules=rules,
        surface_factory=MatplotlibSurfaceFactory(dpi=rules.render.dpi),
        storage=storage,
        id_generator=ShortIdGenerator(rules.storage.id_length),
    )
