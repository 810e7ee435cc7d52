"""
Typed error taxonomy for chart invocations.

Every error raised inside the pipeline is a ChartError. The message always
starts with a machine-readable prefix so an upstream gateway can map it to a
transport status without inspecting the exception type:

- [BadRequest]           -> caller supplied an invalid request
- [Forbidden]            -> the object store refused the upload
- [InternalServerError]  -> configuration, rendering or signing failure

Invariants:
- str(error) begins with error.prefix
- Errors are reported exactly once, by the handler component
"""

from __future__ import annotations

from typing import ClassVar, Literal

ErrorKind = Literal["configuration", "validation", "render", "storage", "internal"]

BAD_REQUEST = "[BadRequest]"
FORBIDDEN = "[Forbidden]"
INTERNAL_SERVER_ERROR = "[InternalServerError]"


class ChartError(Exception):
    """Base class for all chart invocation errors."""

    prefix: ClassVar[str] = INTERNAL_SERVER_ERROR
    kind: ClassVar[ErrorKind] = "internal"

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"{self.prefix} {detail}")

    @property
    def message(self) -> str:
        return str(self)


class ConfigurationError(ChartError):
    """Required deployment configuration is missing."""

    kind = "configuration"

    def __init__(self, setting: str) -> None:
        self.setting = setting
        super().__init__(f"Missing required environment variable '{setting}'")


class ValidationError(ChartError):
    """The inbound request is missing a field or carries an invalid value."""

    prefix = BAD_REQUEST
    kind = "validation"

    def __init__(self, detail: str, *, field: str | None = None) -> None:
        self.field = field
        super().__init__(f"Validation error: {detail}")


# --- Render errors ---


class RenderError(ChartError):
    """The rendering engine failed at a named stage."""

    kind = "render"

    def __init__(self, detail: str, *, stage: str) -> None:
        self.stage = stage
        super().__init__(detail)


class DrawError(RenderError):
    """The engine could not draw the supplied chart specification."""

    def __init__(self) -> None:
        super().__init__(
            "Unable to process supplied chart specification. "
            "Check the chart type, data and options syntax.",
            stage="draw",
        )


class RenderResourceError(RenderError):
    """The engine could not provide a resource (canvas, buffer or stream)."""

    def __init__(self, resource: str, *, stage: str) -> None:
        self.resource = resource
        super().__init__(
            f"Unable to obtain necessary charting resources ({resource}). "
            "See log for details.",
            stage=stage,
        )


class RenderTimeoutError(RenderError):
    """The engine did not signal completion of a stage in time."""

    def __init__(self, stage: str, timeout_seconds: float) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Rendering stage '{stage}' did not complete within {timeout_seconds:g} seconds",
            stage=stage,
        )


# --- Storage errors ---


class StorageError(ChartError):
    """Base class for object storage failures."""

    kind = "storage"


class UploadError(StorageError):
    """The encoded image could not be written to the bucket."""

    prefix = FORBIDDEN

    def __init__(self, bucket: str) -> None:
        self.bucket = bucket
        super().__init__(f"Unable to store chart image in S3 Bucket '{bucket}'")


class SigningError(StorageError):
    """A pre-signed URL could not be computed for a stored object."""

    def __init__(self, bucket: str, key: str) -> None:
        self.bucket = bucket
        self.key = key
        super().__init__(f"Unable to sign retrieval URL for '{key}' in S3 Bucket '{bucket}'")


class UnexpectedError(ChartError):
    """Wraps a failure that escaped every stage boundary."""

    def __init__(self) -> None:
        super().__init__("Unexpected failure while processing chart request. See log for details.")
