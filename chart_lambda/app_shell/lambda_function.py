"""
AWS Lambda entry point.

Handler setting: chart_lambda.app_shell.lambda_function.get_chart

Returns the pre-signed URL string on success. On failure the ChartError is
raised, so the runtime reports an errorMessage starting with
[BadRequest], [Forbidden] or [InternalServerError].
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, cast

from chart_lambda.app_shell.config import HandlerSettings, configure_logging
from chart_lambda.app_shell.context import create_handler
from chart_lambda.components.handler import ChartHandler

logger = logging.getLogger(__name__)


@lru_cache
def get_handler() -> ChartHandler:
    """Build the handler once per container; reused by warm invocations."""
    settings = HandlerSettings.from_env()
    configure_logging(settings)
    return create_handler(settings)


def get_chart(event: dict[str, Any], context: Any) -> str:
    request_id = getattr(context, "aws_request_id", None)
    logger.info("Chart invocation %s", request_id)

    result = get_handler().invoke(event)
    if result.error is not None:
        raise result.error
    return cast(str, result.url)
