from functools import lru_cache

from chart_lambda.app_shell.config import HandlerSettings
from chart_lambda.app_shell.context import create_handler
from chart_lambda.components.handler import ChartHandler


@lru_cache
def get_settings() -> HandlerSettings:
    return HandlerSettings.from_env()


@lru_cache
def get_chart_handler() -> ChartHandler:
    return create_handler(get_settings())
