"""Single-pass tree walker that builds the module registry of one file.

The walker visits every node of a file in order and recognises four shapes:

- a module definition (the file itself, or a ``class``),
- a use of the purity marker (``pure_module_check.pure_module(force=...)``),
- a protocol definition (``class X(Protocol)``),
- a call ``Alias.function(...)`` to a partially pure module.

Every other node passes through untouched. The tree is never modified; the
only output is the registry of ``ModuleState`` records.
"""

from __future__ import annotations

import ast
import logging
from types import MappingProxyType

from pure_module_check.aliases import Alias, local_aliases, module_dependencies
from pure_module_check.names import dotted_path, join_name, parent_name
from pure_module_check.registry import CollectedModules
from pure_module_check.scope import Scope, resolve_scope
from pure_module_check.state import Collision, Context, ModuleState, Registry

logger = logging.getLogger(__name__)

_PROTOCOL_BASES: frozenset[tuple[str, ...]] = frozenset(
    {
        ("Protocol",),
        ("typing", "Protocol"),
        ("typing_extensions", "Protocol"),
    }
)


def is_protocol_definition(node: ast.ClassDef) -> bool:
    """True when a base of the class is ``Protocol`` (plain or subscripted)."""
    bases = (base.value if isinstance(base, ast.Subscript) else base for base in node.bases)
    return any(dotted_path(base) in _PROTOCOL_BASES for base in bases)


def force_option(call: ast.Call) -> bool:
    """Value of the ``force`` keyword of a marker call.

    Absent, or not a literal, counts as False.
    """
    for keyword in call.keywords:
        if keyword.arg != "force":
            continue
        try:
            return bool(ast.literal_eval(keyword.value))
        except (ValueError, TypeError):
            logger.debug("Non-literal force option %r treated as False", ast.unparse(keyword.value))
            return False
    return False


class ModuleCollector(ast.NodeVisitor):
    """AST visitor accumulating ``ModuleState`` records for one file."""

    def __init__(self, context: Context) -> None:
        """Initialize collector.

        Args:
            context: Per-file context (tree, module name, marker, partial purity map)
        """
        self.context = context
        self.registry: Registry = {}
        self.collisions: list[Collision] = []
        # Aliases of the definitions enclosing the node being visited, outermost first
        self.enclosing_aliases: list[tuple[Alias, ...]] = []
        # (function scope, module, function) in encounter order
        self.pending_calls: list[tuple[str, str, str]] = []

    def collect(self) -> CollectedModules:
        """Walk the whole file and return its registry."""
        self.visit(self.context.tree)
        for scope_name, module, function in self.pending_calls:
            owner = self._call_owner(scope_name)
            if owner is None:
                logger.debug("No module state for scope %s; call %s.%s skipped", scope_name, module, function)
                continue
            self.registry[owner] = self.registry[owner].record_impure_call(module, function)
        return CollectedModules(
            registry=MappingProxyType(dict(self.registry)),
            collisions=tuple(self.collisions),
        )

    def _scope(self, line: int) -> Scope | None:
        return resolve_scope(self.context.tree, line, self.context.module_name)

    def _location(self, line: int) -> str:
        return f"{self.context.filename}:{line}"

    def _visible_aliases(self) -> tuple[Alias, ...]:
        return tuple(alias for aliases in reversed(self.enclosing_aliases) for alias in aliases)

    def _visit_nested(self, node: ast.AST) -> None:
        self.enclosing_aliases.append(local_aliases(node, self.context.package))
        self.generic_visit(node)
        self.enclosing_aliases.pop()

    def _store(self, state: ModuleState) -> None:
        previous = self.registry.get(state.name)
        if previous is not None:
            logger.warning(
                "Module %s redefined at %s; definition at line %d is overwritten",
                state.name,
                self._location(state.line),
                previous.line,
            )
            self.collisions.append(Collision(name=state.name, overwritten=previous, winner=state))
        self.registry[state.name] = state

    # Module definitions

    def _define_module(self, name: str, node: ast.AST, line: int) -> None:
        dependencies = module_dependencies(node, self.context, self._visible_aliases())
        excluded = {self.context.marker_name, self.context.marker_module}
        self._store(
            ModuleState(
                name=name,
                filename=self.context.filename,
                line=line,
                dependencies=dependencies - excluded,
            )
        )

    def _define_protocol(self, name: str, line: int) -> None:
        # Protocols are assumed pure; their bodies are not analyzed.
        self._store(
            ModuleState(
                name=name,
                filename=self.context.filename,
                line=line,
                marked_pure=True,
                protocol=True,
            )
        )

    def visit_Module(self, node: ast.Module) -> None:
        self._define_module(self.context.module_name, node, 1)
        self._visit_nested(node)

    def visit_ClassDef(self, node: ast.ClassDef) -> None:
        scope = self._scope(node.lineno)
        if scope is None or scope.kind != "module":
            logger.debug("No module scope for class %s at %s", node.name, self._location(node.lineno))
        elif is_protocol_definition(node):
            self._define_protocol(scope.name, node.lineno)
        else:
            self._define_module(scope.name, node, node.lineno)
        self._visit_nested(node)

    def visit_FunctionDef(self, node: ast.FunctionDef) -> None:
        self._visit_nested(node)

    def visit_AsyncFunctionDef(self, node: ast.AsyncFunctionDef) -> None:
        self._visit_nested(node)

    # Purity marker

    def visit_Expr(self, node: ast.Expr) -> None:
        match node.value:
            case ast.Call(func=func) as call if dotted_path(func) == self.context.marker:
                self._mark_pure(call, node.lineno)
        self.generic_visit(node)

    def _mark_pure(self, call: ast.Call, line: int) -> None:
        scope = self._scope(line)
        state = self.registry.get(scope.name) if scope is not None and scope.kind == "module" else None
        if state is None:
            logger.debug("Purity marker at %s is not in a module or class body; ignored", self._location(line))
            return
        self.registry[state.name] = state.mark_pure(force_option(call))

    # Calls to partially pure modules

    def visit_Call(self, node: ast.Call) -> None:
        match node.func:
            case ast.Attribute(value=ast.Name(id=module), attr=function) if (
                function in self.context.partial_pure_functions.get(module, ())
            ):
                self._record_impure_call(module, function, node.lineno)
        self.generic_visit(node)

    def _record_impure_call(self, module: str, function: str, line: int) -> None:
        scope = self._scope(line)
        if scope is None or scope.kind != "function":
            logger.debug("Call %s.%s at %s is outside a function; skipped", module, function, self._location(line))
            return
        self.pending_calls.append((scope.name, module, function))

    def _call_owner(self, scope_name: str) -> str | None:
        """Definition an impure call made in ``scope_name`` is charged to.

        The innermost enclosing definition marked pure, else the innermost
        enclosing definition. Enclosing protocols end the search, and a call
        made directly in a protocol's methods is not charged at all.
        """
        fallback: str | None = None
        name = parent_name(scope_name)
        while name:
            state = self.registry.get(name)
            if state is not None:
                if state.protocol:
                    break
                if state.marked_pure:
                    return name
                fallback = fallback or name
            name = parent_name(name)
        return fallback


def class_definitions(tree: ast.Module, module_name: str) -> frozenset[str]:
    """Names of the classes reachable as attributes of the file module.

    Classes defined inside functions are left out; no import can name them.
    """
    names: set[str] = set()

    def visit(node: ast.AST, prefix: str) -> None:
        for child in ast.iter_child_nodes(node):
            match child:
                case ast.ClassDef(name=name):
                    qualified = join_name(prefix, name)
                    names.add(qualified)
                    visit(child, qualified)
                case ast.FunctionDef() | ast.AsyncFunctionDef() | ast.Lambda():
                    continue
                case _:
                    visit(child, prefix)

    visit(tree, module_name)
    return frozenset(names)


def collect_module_states(context: Context) -> CollectedModules:
    """Walk one file and return the module states it defines."""
    return ModuleCollector(context).collect()
