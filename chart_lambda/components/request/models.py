"""
Request component input/output models.

Wire payload keys (camelCase) are mapped to snake_case attributes here.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

# --- Wire keys ---

EVENT_KEY_CHART_SPEC = "chartSpec"
EVENT_KEY_CHART_SPEC_LEGACY = "chartJsOptions"
EVENT_KEY_S3_PREFIX = "s3Prefix"
EVENT_KEY_WIDTH = "chartWidth"
EVENT_KEY_HEIGHT = "chartHeight"
EVENT_KEY_EXPIRE_TIME = "expireTime"
EVENT_KEY_FORMAT = "fileFormat"

# Deployment setting that names the destination bucket
ENV_S3_BUCKET = "S3_BUCKET"


class ImageFormat(Enum):
    """Supported encodings: (content type, file extension)."""

    PNG = ("image/png", ".png")
    JPEG = ("image/jpeg", ".jpg")

    @property
    def content_type(self) -> str:
        return self.value[0]

    @property
    def extension(self) -> str:
        return self.value[1]

    @classmethod
    def from_wire(cls, value: Any) -> ImageFormat:
        """'jpg'/'jpeg' select JPEG; every other value falls back to PNG."""
        if isinstance(value, str) and value.strip().lower() in ("jpg", "jpeg"):
            return cls.JPEG
        return cls.PNG


@dataclass(frozen=True)
class BackgroundFill:
    """
    Rendering directive: paint a solid opaque rectangle over the full canvas
    before any dataset is drawn.

    A fresh instance is built per invocation so no two invocations share it.
    """

    color: str = "white"

    def before_draw(self, chart: Any) -> None:
        chart.fill_rect(0, 0, chart.width, chart.height, self.color)


@dataclass(frozen=True)
class ChartRequest:
    """Validated, defaulted unit of work."""

    bucket: str
    chart_spec: dict[str, Any]
    storage_prefix: str
    width: int
    height: int
    expire_seconds: int
    image_format: ImageFormat

    @property
    def content_type(self) -> str:
        return self.image_format.content_type

    @property
    def extension(self) -> str:
        return self.image_format.extension
