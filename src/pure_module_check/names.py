"""Helpers for dotted, fully-qualified names."""

from __future__ import annotations

import ast

# A configured library entry ending in this suffix matches by prefix.
WILDCARD_SUFFIX = ".*"

# References whose target is only known at runtime start with this prefix.
DYNAMIC_PREFIX = "<dynamic>"


def join_name(*parts: str | None) -> str:
    """Join name segments with dots, skipping empty segments."""
    return ".".join(part for part in parts if part)


def split_name(name: str) -> tuple[str, ...]:
    """Split ``"a.b.c"`` into ``("a", "b", "c")``; the empty name has no segments."""
    return tuple(name.split(".")) if name else ()


def parent_name(name: str) -> str:
    """Drop the last segment: ``"a.b.c"`` -> ``"a.b"``; a single segment gives ``""``."""
    return name.rpartition(".")[0]


def dotted_path(node: ast.expr) -> tuple[str, ...] | None:
    """Return the segments of a ``Name``/``Attribute`` chain, or None for anything else.

    Example:
        ``pure_module_check.pure_module`` -> ``("pure_module_check", "pure_module")``
    """
    match node:
        case ast.Name(id=name):
            return (name,)
        case ast.Attribute(value=value, attr=attr):
            prefix = dotted_path(value)
            return None if prefix is None else (*prefix, attr)
        case _:
            return None


def resolve_relative(module: str | None, level: int, package: str) -> str:
    """Turn the target of a (possibly relative) ``from`` import into an absolute name.

    Args:
        module: Module text after the dots (``None`` for ``from . import x``)
        level: Number of leading dots
        package: Package containing the importing file

    Returns:
        Absolute dotted name. Levels past the top package are clamped to it.
    """
    if level == 0:
        return module or ""
    segments = split_name(package)
    base = segments[: max(len(segments) - (level - 1), 0)]
    return join_name(*base, module)
