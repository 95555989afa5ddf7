"""Alias tables and dependency extraction for module definitions.

A module's dependencies come from two places:

- every module it imports (already absolute, relative imports resolved).
  ``from a import b`` depends on ``a.b`` when that is a project file or
  class, otherwise on ``a``.
- every dotted call target ``x.y.f()`` whose head ``x`` is bound to a module
  by an import of the file. The reference is ``x.y``; it is resolved to its
  fully-qualified form through the alias table.

Python cannot tell ``obj.method()`` from ``module.function()`` syntactically,
so only names bound by imports count as module references.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Iterator

from pure_module_check.names import (
    DYNAMIC_PREFIX,
    dotted_path,
    join_name,
    resolve_relative,
    split_name,
)

if TYPE_CHECKING:
    from pure_module_check.state import Context


_IMPORT_MODULE_CALLS: frozenset[tuple[str, ...]] = frozenset(
    {("importlib", "import_module"), ("import_module",)}
)


@dataclass(frozen=True)
class Alias:
    """A local name bound to a fully-qualified path by an import.

    ``import a.b`` binds ``a`` to ``a``; ``import a.b as c`` binds ``c`` to
    ``a.b``; ``from a import b as c`` binds ``c`` to ``a.b``.
    """

    short: str
    target: str


@dataclass(frozen=True)
class References:
    """Raw module references found in a subtree, in source order.

    Attributes:
        imported: Absolute module names from imports (no resolution needed)
        qualified: Dotted call-target prefixes still to be resolved via aliases
    """

    imported: tuple[str, ...]
    qualified: tuple[str, ...]


def _source_order(nodes: Iterable[ast.AST]) -> list[ast.AST]:
    return sorted(nodes, key=lambda node: (getattr(node, "lineno", 0), getattr(node, "col_offset", 0)))


def _imports(node: ast.AST) -> list[ast.AST]:
    return _source_order(
        child for child in ast.walk(node) if isinstance(child, (ast.Import, ast.ImportFrom))
    )


def _import_aliases(node: ast.Import) -> Iterator[Alias]:
    for imported in node.names:
        if imported.asname:
            yield Alias(imported.asname, imported.name)
        else:
            head = split_name(imported.name)[0]
            yield Alias(head, head)


def _from_import_aliases(node: ast.ImportFrom, package: str) -> Iterator[Alias]:
    base = resolve_relative(node.module, node.level, package)
    for imported in node.names:
        if imported.name == "*":
            continue
        yield Alias(imported.asname or imported.name, join_name(base, imported.name))


def _own_imports(node: ast.AST) -> list[ast.AST]:
    """Imports of ``node`` itself, leaving out nested classes and functions."""
    found: list[ast.AST] = []
    for child in ast.iter_child_nodes(node):
        match child:
            case ast.ClassDef() | ast.FunctionDef() | ast.AsyncFunctionDef() | ast.Lambda():
                continue
            case ast.Import() | ast.ImportFrom():
                found.append(child)
            case _:
                found.extend(_own_imports(child))
    return found


def _aliases_of(statements: Iterable[ast.AST], package: str) -> tuple[Alias, ...]:
    found: dict[Alias, None] = {}
    for statement in _source_order(statements):
        match statement:
            case ast.Import():
                found.update(dict.fromkeys(_import_aliases(statement)))
            case ast.ImportFrom():
                found.update(dict.fromkeys(_from_import_aliases(statement, package)))
    return tuple(found)


def collect_aliases(node: ast.AST, package: str) -> tuple[Alias, ...]:
    """Return every alias introduced anywhere inside ``node``, in source order, deduplicated."""
    return _aliases_of(_imports(node), package)


def local_aliases(node: ast.AST, package: str) -> tuple[Alias, ...]:
    """Aliases a definition makes visible to the definitions nested in it.

    Imports inside nested classes and functions are not included; those
    only bind names within their own body.
    """
    return _aliases_of(_own_imports(node), package)


def module_bound_names(
    tree: ast.AST,
    package: str,
    project_modules: frozenset[str],
) -> frozenset[str]:
    """Names that an import binds to a module.

    ``import`` always binds a module. ``from a import b`` binds a module only
    when ``a.b`` is one of the project's own module definitions: a file
    module or a class defined at the top of one.
    """
    bound: set[str] = set()
    for statement in _imports(tree):
        match statement:
            case ast.Import():
                bound.update(alias.short for alias in _import_aliases(statement))
            case ast.ImportFrom():
                bound.update(
                    alias.short
                    for alias in _from_import_aliases(statement, package)
                    if alias.target in project_modules
                )
    return frozenset(bound)


def _imported_modules(statement: ast.Import | ast.ImportFrom, context: Context) -> list[str]:
    match statement:
        case ast.Import(names=names):
            return [imported.name for imported in names]
        case ast.ImportFrom(module=module, level=level, names=names):
            base = resolve_relative(module, level, context.package)
            candidates = [join_name(base, imported.name) for imported in names]
            return [
                candidate if candidate in context.project_modules else base
                for candidate in candidates
            ]


def _import_module_reference(call: ast.Call) -> str | None:
    """Reference made by ``importlib.import_module(...)``, or None without arguments."""
    if not call.args:
        return None
    target = call.args[0]
    match target:
        case ast.Constant(value=str(name)) if name and not name.startswith("."):
            return name
        case _:
            return f"{DYNAMIC_PREFIX}({ast.unparse(target)})"


def collect_references(node: ast.AST, context: Context) -> References:
    """Collect the raw module references used anywhere inside ``node``."""
    imported: list[str] = []
    qualified: list[str] = []
    for child in _source_order(ast.walk(node)):
        match child:
            case ast.Import() | ast.ImportFrom():
                imported.extend(_imported_modules(child, context))
            case ast.Call(func=func):
                path = dotted_path(func)
                if path is None:
                    continue
                if path in _IMPORT_MODULE_CALLS:
                    reference = _import_module_reference(child)
                    if reference is not None:
                        imported.append(reference)
                if len(path) > 1 and path[0] in context.module_bound_names:
                    qualified.append(join_name(*path[:-1]))
    return References(imported=tuple(imported), qualified=tuple(qualified))


def resolve_reference(name: str, aliases: Iterable[Alias]) -> str:
    """Resolve a referenced name to its fully-qualified form.

    The name is split at its first dot into a head and an optional
    remainder. The first alias binding the head gives the resolved name
    (with the remainder appended); without a matching alias the name is
    returned unchanged.

    Example:
        >>> resolve_reference("pure2", [Alias("pure2", "example.pure2")])
        'example.pure2'
        >>> resolve_reference("ET.Element", [Alias("ET", "xml.etree.ElementTree")])
        'xml.etree.ElementTree.Element'
    """
    head, _, remainder = name.partition(".")
    match = next((alias for alias in aliases if alias.short == head), None)
    if match is None:
        return name
    return join_name(match.target, remainder)


def module_dependencies(
    node: ast.AST,
    context: Context,
    visible_aliases: tuple[Alias, ...],
) -> frozenset[str]:
    """Fully-qualified, deduplicated dependencies of a module definition.

    Args:
        node: Subtree of the module definition
        context: Per-file context
        visible_aliases: Aliases of enclosing definitions, searched after the
            node's own aliases
    """
    references = collect_references(node, context)
    aliases = (*collect_aliases(node, context.package), *visible_aliases)
    resolved = [resolve_reference(name, aliases) for name in references.qualified]
    return frozenset(name for name in (*references.imported, *resolved) if name)
