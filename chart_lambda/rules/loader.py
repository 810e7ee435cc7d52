import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from chart_lambda.rules.models import ChartRules

# First fenced yaml block of a markdown document
_YAML_FENCE = re.compile(r"^\s*```yaml[^\n]*\n(.*?)^\s*```", re.DOTALL | re.MULTILINE)


def extract_yaml(text: str) -> str:
    match = _YAML_FENCE.search(text)
    return match.group(1) if match else text


def load_rules(path: Path) -> ChartRules:
    """
    Read and validate chart rules.

    Raises FileNotFoundError when path is absent and ValueError when the
    document is not YAML or does not match the rules schema.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Chart rules not found at {path}")

    try:
        document = yaml.safe_load(extract_yaml(path.read_text()))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML syntax in rules file {path}: {exc}") from exc

    try:
        return ChartRules.model_validate(document or {})
    except ValidationError as exc:
        raise ValueError(f"Rules validation failed for {path}:\n{exc}") from exc


def load_rules_or_default(path: Path | None) -> ChartRules:
    """Rules from path, or the built-in defaults when there is no file."""
    if path is None or not path.is_file():
        return ChartRules()
    return load_rules(path)
