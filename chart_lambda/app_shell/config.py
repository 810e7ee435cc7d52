"""
Process-level configuration.

Loaded once at process start and injected into the handler; nothing reads
the environment during an invocation.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from chart_lambda.components.request.models import ENV_S3_BUCKET

ENV_RULES_PATH = "CHART_RULES_PATH"
ENV_AWS_REGION = "AWS_REGION"
ENV_LOG_LEVEL = "CHART_LOG_LEVEL"

DEFAULT_RULES_PATH = "rules.yaml"


class HandlerSettings(BaseModel):
    """Immutable deployment settings."""

    model_config = ConfigDict(frozen=True)

    # Absence is reported per invocation as a ConfigurationError
    s3_bucket: str | None = None
    rules_path: Path = Path(DEFAULT_RULES_PATH)
    aws_region: str | None = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> HandlerSettings:
        env = os.environ if environ is None else environ
        return cls(
            s3_bucket=env.get(ENV_S3_BUCKET) or None,
            rules_path=Path(env.get(ENV_RULES_PATH, DEFAULT_RULES_PATH)),
            aws_region=env.get(ENV_AWS_REGION) or None,
            log_level=env.get(ENV_LOG_LEVEL, "INFO").upper(),
        )


def configure_logging(settings: HandlerSettings) -> None:
    level = getattr(logging, settings.log_level, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # The Lambda runtime installs its own handler; basicConfig is a no-op there
    logging.getLogger().setLevel(level)
