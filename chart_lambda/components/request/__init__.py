"""
Request component - payload validation and chart specification normalization.
"""

from .component import (
    extract_chart_spec,
    normalize_chart_spec,
    parse_chart_spec,
    require_bucket,
    resolve_expire_seconds,
    resolve_image_format,
    resolve_storage_prefix,
    run,
)
from .models import (
    EVENT_KEY_CHART_SPEC,
    EVENT_KEY_CHART_SPEC_LEGACY,
    EVENT_KEY_EXPIRE_TIME,
    EVENT_KEY_FORMAT,
    EVENT_KEY_HEIGHT,
    EVENT_KEY_S3_PREFIX,
    EVENT_KEY_WIDTH,
    BackgroundFill,
    ChartRequest,
    ImageFormat,
)

__all__ = [
    # Component
    "run",
    # Pure functions
    "require_bucket",
    "extract_chart_spec",
    "parse_chart_spec",
    "normalize_chart_spec",
    "resolve_expire_seconds",
    "resolve_image_format",
    "resolve_storage_prefix",
    # Wire keys
    "EVENT_KEY_CHART_SPEC",
    "EVENT_KEY_CHART_SPEC_LEGACY",
    "EVENT_KEY_S3_PREFIX",
    "EVENT_KEY_WIDTH",
    "EVENT_KEY_HEIGHT",
    "EVENT_KEY_EXPIRE_TIME",
    "EVENT_KEY_FORMAT",
    # Models
    "BackgroundFill",
    "ChartRequest",
    "ImageFormat",
]
