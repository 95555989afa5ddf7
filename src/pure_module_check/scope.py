"""Resolve the fully-qualified name of the definition enclosing a source line.

Classes act as nested module definitions: a class ``Inner`` inside class
``Outer`` of module ``pkg.mod`` is named ``pkg.mod.Outer.Inner``. A line
inside a function resolves to a *function scope* named after the outermost
function below the innermost class, e.g. ``pkg.mod.Outer.method``. Functions
nested in functions (and lambdas) belong to that outer function.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
from typing import Literal

from pure_module_check.names import join_name

_DEFINITIONS = (ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)


@dataclass(frozen=True)
class Scope:
    """Scope enclosing a line."""

    kind: Literal["module", "function"]
    name: str


def _has_position(node: ast.AST) -> bool:
    return getattr(node, "lineno", None) is not None and getattr(node, "end_lineno", None) is not None


def _spans(node: ast.AST, line: int) -> bool:
    return _has_position(node) and node.lineno <= line <= node.end_lineno  # type: ignore[attr-defined]


def _definition_chain(node: ast.AST, line: int) -> list[ast.ClassDef | ast.FunctionDef | ast.AsyncFunctionDef]:
    """Definitions enclosing ``line``, outermost first.

    Children without a position (``match_case``, ``arguments``...) are
    searched through since they may still contain statements.
    """
    for child in ast.iter_child_nodes(node):
        if _has_position(child) and not _spans(child, line):
            continue
        if isinstance(child, _DEFINITIONS):
            return [child, *_definition_chain(child, line)]
        chain = _definition_chain(child, line)
        if chain:
            return chain
    return []


def _tree_spans(tree: ast.Module, line: int) -> bool:
    if not tree.body:
        return False
    last = max(statement.end_lineno or statement.lineno for statement in tree.body)
    return 1 <= line <= last


def resolve_scope(tree: ast.Module, line: int, module_name: str) -> Scope | None:
    """Return the scope lexically enclosing ``line`` in ``tree``.

    Args:
        tree: Whole tree of the file
        line: 1-based source line
        module_name: Fully-qualified name of the file module

    Returns:
        The enclosing scope, or None when the line lies outside the file's
        statements (callers treat this as an unknown scope and skip)
    """
    if not _tree_spans(tree, line):
        return None

    names = [module_name]
    in_function = False
    for definition in _definition_chain(tree, line):
        if isinstance(definition, ast.ClassDef):
            names.append(definition.name)
            in_function = False
        elif not in_function:
            names.append(definition.name)
            in_function = True

    return Scope(kind="function" if in_function else "module", name=join_name(*names))
