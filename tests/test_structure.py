"""
Structure lint tests.
Verify that the component skeleton exists and follows conventions.
"""

from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
PACKAGE = PROJECT_ROOT / "chart_lambda"

COMPONENTS = ["request", "render", "artifact_store", "handler"]


class TestProjectStructure:
    def test_core_directories_exist(self) -> None:
        assert (PACKAGE / "core").is_dir()
        assert (PACKAGE / "core" / "ports").is_dir()

    def test_shell_directories_exist(self) -> None:
        assert (PACKAGE / "app_shell").is_dir()
        assert (PACKAGE / "api").is_dir()

    def test_adapters_directory_exists(self) -> None:
        assert (PACKAGE / "adapters").is_dir()
        assert (PACKAGE / "adapters" / "render").is_dir()

    def test_rules_file_exists(self) -> None:
        assert (PROJECT_ROOT / "rules.yaml").is_file()

    def test_tests_structure_exists(self) -> None:
        assert (PROJECT_ROOT / "tests" / "unit").is_dir()
        assert (PROJECT_ROOT / "tests" / "integration").is_dir()
        assert (PROJECT_ROOT / "tests" / "regression").is_dir()

    def test_components_follow_layout(self) -> None:
        """Each component has models, component and its own unit tests."""
        for name in COMPONENTS:
            root = PACKAGE / "components" / name
            for part in ["__init__.py", "models.py", "component.py", "tests/test_unit.py"]:
                assert (root / part).is_file(), f"{name} is missing {part}"

    def test_init_files_present(self) -> None:
        packages = [
            "chart_lambda",
            "chart_lambda/core",
            "chart_lambda/core/ports",
            "chart_lambda/adapters",
            "chart_lambda/adapters/render",
            "chart_lambda/rules",
            "chart_lambda/app_shell",
            "chart_lambda/api",
            "chart_lambda/components",
        ]
        for pkg in packages:
            init_file = PROJECT_ROOT / pkg / "__init__.py"
            assert init_file.is_file(), f"Missing __init__.py in {pkg}"
