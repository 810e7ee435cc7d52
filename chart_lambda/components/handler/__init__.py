"""
Handler component - pipeline orchestration and result reporting.
"""

from .component import ChartHandler
from .models import ChartResult, ResultCallback

__all__ = [
    "ChartHandler",
    "ChartResult",
    "ResultCallback",
]
