"""Configuration loading for the pure module checker.

Reads the ``[tool.pure-module-check]`` table of the nearest
``pyproject.toml``. Every key is optional; missing keys take the defaults
below. Example::

    [tool.pure-module-check]
    pure_mod_marker = "myproject.markers.pure_module"
    extra_pure_mods = ["attrs", "pydantic.*"]
    paths = ["src/myproject"]

    [tool.pure-module-check.stdlib_partial_pure_mods_impure_functions]
    datetime = ["now", "utcnow", "today"]
    random = ["random", "randint", "choice"]
"""

from __future__ import annotations

import re
import tomllib
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pure_module_check.errors import (
    ConfigError,
    ConfigNotFound,
    ConfigParseFailed,
    ConfigValidationFailed,
)
from pure_module_check.result import Failure, Result, Success

SECTION = "pure-module-check"

DEFAULT_PURE_MOD_MARKER = "pure_module_check.pure_module"

# Collection, string and control-flow modules. logging and importlib are
# only dubiously pure but are accepted so marked modules can log and use
# dynamic imports.
DEFAULT_STDLIB_PURE_MODS: tuple[str, ...] = (
    "__future__",
    "abc",
    "bisect",
    "collections",
    "collections.*",
    "contextlib",
    "copy",
    "dataclasses",
    "datetime",
    "datetime.*",
    "decimal",
    "enum",
    "fractions",
    "functools",
    "heapq",
    "itertools",
    "json",
    "math",
    "numbers",
    "operator",
    "re",
    "statistics",
    "string",
    "textwrap",
    "types",
    "typing",
    "typing.*",
    "typing_extensions",
    "logging",
    "importlib",
)

DEFAULT_PARTIAL_PURE_MODS_IMPURE_FUNCTIONS: dict[str, tuple[str, ...]] = {
    "datetime": ("now", "utcnow", "today"),
}

_DOTTED_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


class PureModuleConfig(BaseModel):
    """Checker configuration.

    Attributes:
        pure_mod_marker: Dotted name of the marker call asserting purity
        stdlib_pure_mods: Library modules always treated as pure
        extra_pure_mods: Project-specific pure modules or ``pkg.*`` patterns
        stdlib_partial_pure_mods_impure_functions: Module -> its impure functions
        report_duplicate_modules: Emit PMC003 when two definitions share a name
        paths: Default files or directories to check
    """

    pure_mod_marker: str = DEFAULT_PURE_MOD_MARKER
    stdlib_pure_mods: tuple[str, ...] = DEFAULT_STDLIB_PURE_MODS
    extra_pure_mods: tuple[str, ...] = ()
    stdlib_partial_pure_mods_impure_functions: dict[str, tuple[str, ...]] = Field(
        default_factory=lambda: dict(DEFAULT_PARTIAL_PURE_MODS_IMPURE_FUNCTIONS)
    )
    report_duplicate_modules: bool = False
    paths: Annotated[tuple[str, ...], Field(min_length=1)] = ("src",)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("pure_mod_marker")
    @classmethod
    def _marker_is_dotted_name(cls, value: str) -> str:
        if not _DOTTED_NAME.match(value):
            raise ValueError(f"pure_mod_marker must be a dotted name, got {value!r}")
        return value

    @property
    def lib_pure_mods(self) -> tuple[str, ...]:
        """Standard library and extra pure modules, in that order."""
        return (*self.stdlib_pure_mods, *self.extra_pure_mods)

    @classmethod
    def create(cls, **data: object) -> Result[PureModuleConfig, ValidationError]:
        """Construct a config, surfacing validation issues as a Result."""
        try:
            return Success(cls.model_validate(data))
        except ValidationError as exc:
            return Failure(exc)


def find_pyproject(start: Path) -> Path | None:
    """Return the nearest ``pyproject.toml`` at or above ``start``."""
    directory = (start if start.is_dir() else start.parent).resolve()
    return next(
        (
            candidate / "pyproject.toml"
            for candidate in (directory, *directory.parents)
            if (candidate / "pyproject.toml").is_file()
        ),
        None,
    )


def _read_section(path: Path) -> Result[dict[str, object], ConfigError]:
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        return Failure(ConfigParseFailed(path=path, message=str(exc)))

    tool = data.get("tool", {})
    section = tool.get(SECTION, {}) if isinstance(tool, dict) else {}
    if not isinstance(section, dict):
        return Failure(ConfigParseFailed(path=path, message=f"[tool.{SECTION}] must be a table"))
    return Success(section)


def config_root(start: Path | None = None, config_file: Path | None = None) -> Path:
    """Directory the configured ``paths`` are relative to.

    The directory of ``config_file``, else of the nearest ``pyproject.toml``
    at or above ``start``, else ``start`` itself.
    """
    base = start or Path.cwd()
    path = config_file if config_file is not None else find_pyproject(base)
    return (path.parent if path is not None else base).resolve()


def load_config(
    start: Path | None = None,
    config_file: Path | None = None,
) -> Result[PureModuleConfig, ConfigError]:
    """Load configuration.

    Args:
        start: Directory to search upwards from for ``pyproject.toml``
            (default: current directory)
        config_file: Explicit TOML file; must exist when given

    Returns:
        The validated configuration. Without any ``pyproject.toml``, or
        without the section, the defaults.
    """
    if config_file is not None and not config_file.is_file():
        return Failure(ConfigNotFound(path=config_file))

    path = config_file if config_file is not None else find_pyproject(start or Path.cwd())
    if path is None:
        return PureModuleConfig.create().map_error(lambda exc: ConfigValidationFailed(path=None, error=exc))

    match _read_section(path):
        case Failure(error):
            return Failure(error)
        case Success(section):
            return PureModuleConfig.create(**section).map_error(
                lambda exc: ConfigValidationFailed(path=path, error=exc)
            )
