from pathlib import Path

import pytest

from chart_lambda.adapters.ids import ShortIdGenerator
from chart_lambda.adapters.local_storage import LocalObjectStorage
from chart_lambda.adapters.render.mpl_renderer import MatplotlibSurfaceFactory
from chart_lambda.components.handler import ChartHandler
from chart_lambda.rules.loader import load_rules
from chart_lambda.rules.models import ChartRules

PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture
def rules() -> ChartRules:
    """Rules from the project's rules.yaml."""
    return load_rules(PROJECT_ROOT / "rules.yaml")


@pytest.fixture
def local_storage(tmp_path) -> LocalObjectStorage:
    return LocalObjectStorage(tmp_path / "storage")


@pytest.fixture
def chart_handler(rules, local_storage) -> ChartHandler:
    """
    Handler wired with the real matplotlib engine and filesystem storage.
    """
    return ChartHandler(
        bucket="charts",
        rules=rules,
        surface_factory=MatplotlibSurfaceFactory(dpi=rules.render.dpi),
        storage=local_storage,
        id_generator=ShortIdGenerator(rules.storage.id_length),
    )
