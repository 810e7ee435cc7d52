import pytest

from chart_lambda.core.errors import (
    BAD_REQUEST,
    FORBIDDEN,
    INTERNAL_SERVER_ERROR,
    ChartError,
    ConfigurationError,
    DrawError,
    RenderResourceError,
    RenderTimeoutError,
    SigningError,
    UnexpectedError,
    UploadError,
    ValidationError,
)


@pytest.mark.parametrize(
    ("error", "prefix", "kind"),
    [
        (ConfigurationError("S3_BUCKET"), INTERNAL_SERVER_ERROR, "configuration"),
        (ValidationError("Missing field 'chartSpec'"), BAD_REQUEST, "validation"),
        (DrawError(), INTERNAL_SERVER_ERROR, "render"),
        (RenderResourceError("ImageBuffer", stage="encode"), INTERNAL_SERVER_ERROR, "render"),
        (RenderTimeoutError("draw", 30), INTERNAL_SERVER_ERROR, "render"),
        (UploadError("charts"), FORBIDDEN, "storage"),
        (SigningError("charts", "a.png"), INTERNAL_SERVER_ERROR, "storage"),
        (UnexpectedError(), INTERNAL_SERVER_ERROR, "internal"),
    ],
)
def test_message_starts_with_prefix(error: ChartError, prefix: str, kind: str) -> None:
    assert str(error).startswith(prefix + " ")
    assert error.message == str(error)
    assert error.kind == kind


def test_validation_message():
    err = ValidationError("Missing field 'chartSpec'", field="chartSpec")

    assert str(err) == "[BadRequest] Validation error: Missing field 'chartSpec'"
    assert err.field == "chartSpec"


def test_upload_error_names_bucket():
    assert str(UploadError("charts")) == (
        "[Forbidden] Unable to store chart image in S3 Bucket 'charts'"
    )


def test_render_errors_name_stage():
    assert DrawError().stage == "draw"
    assert RenderTimeoutError("stream", 1.5).stage == "stream"
    assert "1.5 seconds" in str(RenderTimeoutError("stream", 1.5))
