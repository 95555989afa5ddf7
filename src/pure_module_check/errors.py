"""Error ADTs for configuration loading and source parsing."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from pydantic import ValidationError


@dataclass(frozen=True)
class ConfigNotFound:
    """An explicitly requested configuration file does not exist."""

    path: Path
    kind: Literal["ConfigNotFound"] = "ConfigNotFound"

    def __str__(self) -> str:
        return f"configuration file not found: {self.path}"


@dataclass(frozen=True)
class ConfigParseFailed:
    """The configuration file is not valid TOML or the section is not a table."""

    path: Path
    message: str
    kind: Literal["ConfigParseFailed"] = "ConfigParseFailed"

    def __str__(self) -> str:
        return f"cannot read {self.path}: {self.message}"


@dataclass(frozen=True)
class ConfigValidationFailed:
    """Pydantic validation of the configuration section failed."""

    path: Path | None
    error: ValidationError
    kind: Literal["ConfigValidationFailed"] = "ConfigValidationFailed"

    def __str__(self) -> str:
        source = self.path if self.path is not None else "<defaults>"
        return f"invalid configuration in {source}: {self.error}"


ConfigError = ConfigNotFound | ConfigParseFailed | ConfigValidationFailed


@dataclass(frozen=True)
class SourceParseFailed:
    """A source file could not be read or parsed; it is skipped."""

    path: Path
    message: str
    line: int | None = None
    kind: Literal["SourceParseFailed"] = "SourceParseFailed"

    def __str__(self) -> str:
        location = f"{self.path}:{self.line}" if self.line is not None else str(self.path)
        return f"{location}: {self.message}"


__all__ = [
    "ConfigError",
    "ConfigNotFound",
    "ConfigParseFailed",
    "ConfigValidationFailed",
    "SourceParseFailed",
]
