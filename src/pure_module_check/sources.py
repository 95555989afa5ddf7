"""Locating, naming and parsing Python source files."""

from __future__ import annotations

import ast
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from pure_module_check.errors import SourceParseFailed
from pure_module_check.names import join_name, parent_name
from pure_module_check.result import Failure, Result, Success

logger = logging.getLogger(__name__)

SOURCE_SUFFIX = ".py"


@dataclass(frozen=True)
class SourceFile:
    """A parsed source file and the module it defines."""

    path: Path
    module_name: str
    package: str
    tree: ast.Module


def collect_python_files(paths: Iterable[Path]) -> list[Path]:
    """Collect ``.py`` files under the given files and directories.

    Args:
        paths: Files or directories to check

    Returns:
        Sorted, de-duplicated list of Python file paths
    """
    files: set[Path] = set()
    for path in paths:
        if path.is_file() and path.suffix == SOURCE_SUFFIX:
            files.add(path)
        elif path.is_dir():
            files.update(path.rglob(f"*{SOURCE_SUFFIX}"))
        else:
            logger.warning("Skipping %s: not a Python file or directory", path)
    return sorted(files)


def module_name_for_path(path: Path) -> str:
    """Dotted module name of a file, following ``__init__.py`` packages upwards.

    ``src/example/pure1.py`` with ``src/example/__init__.py`` present gives
    ``example.pure1``; ``src/example/__init__.py`` gives ``example``.
    """
    resolved = path.resolve()
    parts = [] if resolved.stem == "__init__" else [resolved.stem]
    directory = resolved.parent
    while (directory / "__init__.py").is_file():
        parts.insert(0, directory.name)
        directory = directory.parent
    return join_name(*parts)


def package_for(path: Path, module_name: str) -> str:
    """Package that relative imports in ``path`` are resolved against."""
    return module_name if path.name == "__init__.py" else parent_name(module_name)


def parse_source(path: Path) -> Result[SourceFile, SourceParseFailed]:
    """Read and parse one file.

    Unreadable files and syntax errors become a ``SourceParseFailed``; the
    runner skips such files.
    """
    try:
        source = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return Failure(SourceParseFailed(path=path, message=str(exc)))

    try:
        tree = ast.parse(source, filename=str(path))
    except SyntaxError as exc:
        return Failure(SourceParseFailed(path=path, message=exc.msg, line=exc.lineno))
    except ValueError as exc:
        return Failure(SourceParseFailed(path=path, message=str(exc)))

    module_name = module_name_for_path(path)
    return Success(
        SourceFile(
            path=path,
            module_name=module_name,
            package=package_for(path, module_name),
            tree=tree,
        )
    )
