"""
Request component - input validation and chart specification normalization.

Turns an untrusted invocation payload into a validated, defaulted
ChartRequest.

Invariants:
- Missing bucket configuration fails before any other work
- chart_spec is a dict with a dict "options" whose "plugins" is always the
  background-fill directive, whatever the caller supplied
- The caller's payload is never mutated
"""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Mapping
from typing import Any

from chart_lambda.core.errors import ConfigurationError, ValidationError
from chart_lambda.rules.models import ChartRules

from .models import (
    EVENT_KEY_CHART_SPEC,
    EVENT_KEY_CHART_SPEC_LEGACY,
    EVENT_KEY_EXPIRE_TIME,
    EVENT_KEY_FORMAT,
    EVENT_KEY_HEIGHT,
    EVENT_KEY_S3_PREFIX,
    EVENT_KEY_WIDTH,
    ENV_S3_BUCKET,
    BackgroundFill,
    ChartRequest,
    ImageFormat,
)

logger = logging.getLogger(__name__)


# --- Pure Functions (Functional Core) ---


def require_bucket(bucket: str | None) -> str:
    """Return the configured bucket or fail with ConfigurationError."""
    if not bucket:
        raise ConfigurationError(ENV_S3_BUCKET)
    return bucket


def extract_chart_spec(event: Mapping[str, Any]) -> Any:
    """Return the raw chart specification, accepting the legacy field name."""
    if EVENT_KEY_CHART_SPEC in event:
        return event[EVENT_KEY_CHART_SPEC]
    if EVENT_KEY_CHART_SPEC_LEGACY in event:
        return event[EVENT_KEY_CHART_SPEC_LEGACY]
    raise ValidationError(
        f"Missing field '{EVENT_KEY_CHART_SPEC}'", field=EVENT_KEY_CHART_SPEC
    )


def parse_chart_spec(raw: Any) -> dict[str, Any]:
    """
    Parse a chart specification into a fresh dict.

    Strings are treated as JSON written with single quotes (handy when
    pasting payloads into a console). Every single quote is rewritten to a
    double quote before parsing, so string values that legitimately contain
    an apostrophe ("O'Brien") cannot be expressed this way. Send a structured
    object for those.
    """
    unparseable = ValidationError(
        f"Unable to parse JSON payload for '{EVENT_KEY_CHART_SPEC}'",
        field=EVENT_KEY_CHART_SPEC,
    )

    if isinstance(raw, str):
        try:
            spec = json.loads(raw.replace("'", '"'))
        except ValueError as exc:
            raise unparseable from exc
    else:
        spec = copy.deepcopy(raw)

    if not isinstance(spec, dict):
        raise unparseable

    options = spec.setdefault("options", {})
    if not isinstance(options, dict):
        raise unparseable

    return spec


def normalize_chart_spec(raw: Any, background_color: str = "white") -> dict[str, Any]:
    """Parse the specification and force the background-fill plugin."""
    spec = parse_chart_spec(raw)
    spec["options"]["plugins"] = BackgroundFill(color=background_color)
    return spec


def _positive_int(event: Mapping[str, Any], key: str, default: int, maximum: int) -> int:
    if key not in event:
        return default

    value = event[key]
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"Field '{key}' must be a positive integer", field=key)
    if value > maximum:
        raise ValidationError(f"Field '{key}' exceeds the maximum of {maximum}", field=key)
    return value


def resolve_expire_seconds(event: Mapping[str, Any], rules: ChartRules) -> int:
    if EVENT_KEY_EXPIRE_TIME not in event:
        return rules.defaults.expire_seconds

    value = event[EVENT_KEY_EXPIRE_TIME]
    ceiling = rules.limits.max_expire_seconds
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(
            f"Field '{EVENT_KEY_EXPIRE_TIME}' must be a positive integer",
            field=EVENT_KEY_EXPIRE_TIME,
        )
    if value > ceiling:
        raise ValidationError(
            f"Exceed max S3 Expire Time (seconds) of {ceiling}",
            field=EVENT_KEY_EXPIRE_TIME,
        )
    return value


def resolve_storage_prefix(event: Mapping[str, Any], rules: ChartRules) -> str:
    value = event.get(EVENT_KEY_S3_PREFIX)
    if value is None:
        return rules.defaults.storage_prefix
    if not isinstance(value, str):
        raise ValidationError(
            f"Field '{EVENT_KEY_S3_PREFIX}' must be a string", field=EVENT_KEY_S3_PREFIX
        )
    return value


def resolve_image_format(event: Mapping[str, Any], rules: ChartRules) -> ImageFormat:
    return ImageFormat.from_wire(event.get(EVENT_KEY_FORMAT, rules.defaults.file_format))


# --- Component Entry Point ---


def run(event: Any, *, bucket: str | None, rules: ChartRules) -> ChartRequest:
    """
    Validate an invocation payload.

    Raises:
        ConfigurationError: bucket is not configured
        ValidationError: payload is missing the chart specification or
            carries an invalid optional value
    """
    resolved_bucket = require_bucket(bucket)

    if not isinstance(event, Mapping):
        raise ValidationError("Request payload must be a JSON object")

    raw_spec = extract_chart_spec(event)
    chart_spec = normalize_chart_spec(raw_spec, rules.render.background_color)
    logger.debug("Normalized chart specification: %s", chart_spec)

    return ChartRequest(
        bucket=resolved_bucket,
        chart_spec=chart_spec,
        storage_prefix=resolve_storage_prefix(event, rules),
        width=_positive_int(event, EVENT_KEY_WIDTH, rules.defaults.width, rules.limits.max_width),
        height=_positive_int(
            event, EVENT_KEY_HEIGHT, rules.defaults.height, rules.limits.max_height
        ),
        expire_seconds=resolve_expire_seconds(event, rules),
        image_format=resolve_image_format(event, rules),
    )
