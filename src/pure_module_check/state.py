"""Data model shared by the walker, the classifier and the runner.

All records are frozen dataclasses. The walker never mutates a
``ModuleState`` in place; it stores a replaced copy in the registry.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Literal, Mapping, TypeAlias

from pure_module_check.aliases import module_bound_names
from pure_module_check.names import join_name, parent_name, split_name


@dataclass(frozen=True)
class ModuleState:
    """Analysis state for one fully-qualified module name.

    Attributes:
        name: Fully-qualified module name (registry key)
        filename: File the definition was found in
        line: Line of the definition (1 for a file module)
        dependencies: Resolved names referenced from the module body
        marked_pure: Module contains a direct use of the purity marker
        force: Marker was used with a truthy ``force`` option
        impure_function_calls: ``(module, function)`` pairs in encounter order
        protocol: Entry was created for a protocol definition
    """

    name: str
    filename: str
    line: int
    dependencies: frozenset[str] = frozenset()
    marked_pure: bool = False
    force: bool = False
    impure_function_calls: tuple[tuple[str, str], ...] = ()
    protocol: bool = False

    def mark_pure(self, force: bool) -> ModuleState:
        """Return a copy marked pure. ``marked_pure`` is never cleared."""
        return replace(self, marked_pure=True, force=force)

    def record_impure_call(self, module: str, function: str) -> ModuleState:
        """Return a copy with ``(module, function)`` appended to the impure calls."""
        return replace(
            self,
            impure_function_calls=(*self.impure_function_calls, (module, function)),
        )


Registry: TypeAlias = dict[str, ModuleState]


@dataclass(frozen=True)
class Context:
    """Per-file, read-only inputs of the walker.

    Attributes:
        marker: Purity marker as dotted segments, e.g. ``("pure_module_check", "pure_module")``
        partial_pure_functions: Partially pure module -> its impure function names
        tree: Whole tree of the file being walked
        module_name: Fully-qualified name of the file module
        package: Package used to resolve relative imports
        filename: Path of the file, for diagnostics
        project_modules: Module names of every file taking part in the run and of
            the classes defined at their top level
        module_bound_names: Names bound to modules by imports anywhere in the file
    """

    marker: tuple[str, ...]
    partial_pure_functions: Mapping[str, tuple[str, ...]]
    tree: ast.Module
    module_name: str
    package: str
    filename: str
    project_modules: frozenset[str] = frozenset()
    module_bound_names: frozenset[str] = frozenset()

    @property
    def marker_name(self) -> str:
        """Marker as a dotted string, e.g. ``"pure_module_check.pure_module"``."""
        return join_name(*self.marker)

    @property
    def marker_module(self) -> str:
        """Module exporting the marker (empty for a bare marker name)."""
        return parent_name(self.marker_name)

    @classmethod
    def create(
        cls,
        *,
        marker: str,
        partial_pure_functions: Mapping[str, tuple[str, ...]],
        tree: ast.Module,
        module_name: str,
        package: str,
        filename: str,
        project_modules: frozenset[str] = frozenset(),
    ) -> Context:
        """Build a context, computing the file's module-bound import names."""
        return cls(
            marker=split_name(marker),
            partial_pure_functions=MappingProxyType(dict(partial_pure_functions)),
            tree=tree,
            module_name=module_name,
            package=package,
            filename=filename,
            project_modules=project_modules,
            module_bound_names=module_bound_names(tree, package, project_modules),
        )


@dataclass(frozen=True)
class Collision:
    """Two definitions sharing one fully-qualified module name (the later one wins)."""

    name: str
    overwritten: ModuleState
    winner: ModuleState


@dataclass(frozen=True)
class Diagnostic:
    """One finding reported to the harness.

    Severity is always ``"warning"`` so any finding fails the run.
    """

    module: str
    message: str
    rule_code: str
    filename: str
    line: int
    severity: Literal["warning"] = "warning"
    details: tuple[str, ...] = field(default=())
