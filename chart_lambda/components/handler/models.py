"""
Handler component models.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from chart_lambda.core.errors import ChartError

# (error, url): exactly one of the two is None
ResultCallback = Callable[[ChartError | None, str | None], None]


@dataclass(frozen=True)
class ChartResult:
    """Terminal outcome of one invocation: a signed URL or a typed error."""

    url: str | None = None
    error: ChartError | None = None

    def __post_init__(self) -> None:
        if (self.url is None) == (self.error is None):
            raise ValueError("ChartResult needs exactly one of url or error")

    @classmethod
    def success(cls, url: str) -> ChartResult:
        return cls(url=url)

    @classmethod
    def failure(cls, error: ChartError) -> ChartResult:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def as_callback_args(self) -> tuple[ChartError | None, str | None]:
        return self.error, self.url
