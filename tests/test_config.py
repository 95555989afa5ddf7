"""Tests for configuration loading from pyproject.toml."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from pure_module_check.config import (
    DEFAULT_PURE_MOD_MARKER,
    DEFAULT_STDLIB_PURE_MODS,
    PureModuleConfig,
    config_root,
    find_pyproject,
    load_config,
)
from tests.helpers import expect_failure, expect_success


def write_pyproject(directory: Path, section: str) -> Path:
    """Write a pyproject.toml with the given ``[tool.pure-module-check]`` body."""
    path = directory / "pyproject.toml"
    path.write_text(
        '[project]\nname = "sample"\nversion = "0.1.0"\n\n'
        f"[tool.pure-module-check]\n{section}\n",
        encoding="utf-8",
    )
    return path


class TestDefaults:
    def test_default_values(self) -> None:
        config = PureModuleConfig()

        assert config.pure_mod_marker == DEFAULT_PURE_MOD_MARKER
        assert config.stdlib_pure_mods == DEFAULT_STDLIB_PURE_MODS
        assert config.extra_pure_mods == ()
        assert config.stdlib_partial_pure_mods_impure_functions == {
            "datetime": ("now", "utcnow", "today")
        }
        assert not config.report_duplicate_modules

    def test_lib_pure_mods_combines_stdlib_and_extra(self) -> None:
        config = PureModuleConfig(stdlib_pure_mods=("json",), extra_pure_mods=("attrs", "pydantic.*"))
        assert config.lib_pure_mods == ("json", "attrs", "pydantic.*")

    def test_config_is_frozen(self) -> None:
        config = PureModuleConfig()
        with pytest.raises(ValidationError):
            config.extra_pure_mods = ("x",)  # type: ignore[misc]


class TestValidation:
    @pytest.mark.parametrize("marker", ["", "pure module", "1pure", "pure..module"])
    def test_invalid_marker_rejected(self, marker: str) -> None:
        expect_failure(PureModuleConfig.create(pure_mod_marker=marker))

    def test_unknown_key_rejected(self) -> None:
        expect_failure(PureModuleConfig.create(pure_mods=["x"]))

    def test_empty_paths_rejected(self) -> None:
        expect_failure(PureModuleConfig.create(paths=[]))


class TestLoadConfig:
    def test_section_values_loaded(self, tmp_path: Path) -> None:
        write_pyproject(
            tmp_path,
            'pure_mod_marker = "app.markers.pure"\n'
            'extra_pure_mods = ["attrs", "pydantic.*"]\n'
            "report_duplicate_modules = true\n"
            "\n[tool.pure-module-check.stdlib_partial_pure_mods_impure_functions]\n"
            'random = ["random", "choice"]\n',
        )
        config = expect_success(load_config(tmp_path))

        assert config.pure_mod_marker == "app.markers.pure"
        assert config.extra_pure_mods == ("attrs", "pydantic.*")
        assert config.report_duplicate_modules
        assert config.stdlib_partial_pure_mods_impure_functions == {"random": ("random", "choice")}

    def test_search_walks_up_directories(self, tmp_path: Path) -> None:
        write_pyproject(tmp_path, 'extra_pure_mods = ["attrs"]')
        nested = tmp_path / "src" / "app"
        nested.mkdir(parents=True)

        assert find_pyproject(nested) == (tmp_path / "pyproject.toml").resolve()
        assert expect_success(load_config(nested)).extra_pure_mods == ("attrs",)

    def test_missing_section_gives_defaults(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n', encoding="utf-8")
        assert expect_success(load_config(tmp_path)) == PureModuleConfig()

    def test_explicit_missing_file(self, tmp_path: Path) -> None:
        error = expect_failure(load_config(config_file=tmp_path / "missing.toml"))
        assert error.kind == "ConfigNotFound"

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text("[tool.pure-module-check\n", encoding="utf-8")

        error = expect_failure(load_config(config_file=path))
        assert error.kind == "ConfigParseFailed"

    def test_section_not_a_table(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.toml"
        path.write_text('[tool]\npure-module-check = "yes"\n', encoding="utf-8")

        error = expect_failure(load_config(config_file=path))
        assert error.kind == "ConfigParseFailed"

    def test_invalid_value(self, tmp_path: Path) -> None:
        write_pyproject(tmp_path, "extra_pure_mods = 3")

        error = expect_failure(load_config(tmp_path))
        assert error.kind == "ConfigValidationFailed"
        assert "extra_pure_mods" in str(error)


class TestConfigRoot:
    def test_explicit_file_directory(self, tmp_path: Path) -> None:
        path = write_pyproject(tmp_path, "")
        assert config_root(config_file=path) == tmp_path.resolve()

    def test_nearest_pyproject_directory(self, tmp_path: Path) -> None:
        write_pyproject(tmp_path, "")
        nested = tmp_path / "src" / "app"
        nested.mkdir(parents=True)

        assert config_root(start=nested) == tmp_path.resolve()
