"""
HTTP gateway for local use.

Mirrors the integration-response mapping an API gateway applies in front
of the Lambda: the error prefix selects the status code.
"""

from typing import Annotated, Any

from fastapi import Body, Depends, FastAPI, HTTPException, status

from chart_lambda.components.handler import ChartHandler
from chart_lambda.core.errors import BAD_REQUEST, FORBIDDEN, ChartError

from .deps import get_chart_handler

STATUS_BY_PREFIX = {
    BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    FORBIDDEN: status.HTTP_403_FORBIDDEN,
}


def status_for_error(error: ChartError) -> int:
    return STATUS_BY_PREFIX.get(error.prefix, status.HTTP_500_INTERNAL_SERVER_ERROR)


app = FastAPI(
    title="Chart Lambda Gateway",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)


@app.post("/charts")
async def create_chart(
    # Any JSON value; non-objects are rejected by the handler as [BadRequest]
    event: Annotated[Any, Body()],
    handler: Annotated[ChartHandler, Depends(get_chart_handler)],
) -> dict[str, str]:
    result = await handler.run(event)
    if result.error is not None:
        raise HTTPException(status_code=status_for_error(result.error), detail=str(result.error))
    return {"url": str(result.url)}


@app.get("/health")
def health_check() -> dict[str, Any]:
    return {"status": "ok"}
