"""Purity classification of a completed module registry.

Runs once, after every file has been walked. A module marked pure is
accepted when each dependency is

- the name of another module marked pure (membership only, see below), or
  of a class nested in one,
- equal to a configured library module,
- matched by a configured wildcard entry ``pkg.*`` (prefix ``pkg.``), or
- a dynamic reference (``<dynamic>(...)``), which cannot be verified.

Membership in the marked-pure set is not a fixpoint: module A depending on
module B is accepted as soon as B is *marked* pure, even when B itself gets
a diagnostic for its own dependencies.
"""

from __future__ import annotations

from typing import Collection, Iterable, Mapping

from pure_module_check.messages import (
    DUPLICATE_MODULE,
    IMPURE_DEPENDENCIES,
    IMPURE_FUNCTION_CALLS,
    duplicate_module_message,
    impure_dependencies_message,
    impure_function_calls_message,
)
from pure_module_check.names import DYNAMIC_PREFIX, WILDCARD_SUFFIX, parent_name
from pure_module_check.state import Collision, Diagnostic, ModuleState


def matches_library(dependency: str, lib_mod: str) -> bool:
    """Exact match, or prefix match for a wildcard entry.

    ``"Foo.*"`` accepts ``"Foo.Bar"`` but neither ``"Foo"`` nor ``"Foobar.x"``.
    """
    if lib_mod.endswith(WILDCARD_SUFFIX):
        return dependency.startswith(lib_mod[:-1])
    return dependency == lib_mod


def is_pure_dependency(
    dependency: str,
    project_mods: Collection[str],
    lib_mods: Iterable[str],
) -> bool:
    """Decide whether a single dependency is acceptable for a pure module.

    Args:
        dependency: Fully-qualified dependency name
        project_mods: Project names accepted as pure, see ``pure_definitions``
        lib_mods: Configured pure library entries (exact or wildcard)
    """
    return (
        dependency in project_mods
        or any(matches_library(dependency, lib_mod) for lib_mod in lib_mods)
        or dependency.startswith(DYNAMIC_PREFIX)
    )


def _impure_dependencies_diagnostic(
    state: ModuleState,
    project_mods: Collection[str],
    lib_mods: tuple[str, ...],
) -> Diagnostic | None:
    impure = sorted(
        dependency
        for dependency in state.dependencies
        if not is_pure_dependency(dependency, project_mods, lib_mods)
    )
    if not impure:
        return None
    return Diagnostic(
        module=state.name,
        message=impure_dependencies_message(state.name, impure),
        rule_code=IMPURE_DEPENDENCIES,
        filename=state.filename,
        line=state.line,
        details=tuple(impure),
    )


def _impure_function_calls_diagnostic(state: ModuleState) -> Diagnostic | None:
    if not state.impure_function_calls:
        return None
    calls = tuple(f"{module}.{function}" for module, function in state.impure_function_calls)
    return Diagnostic(
        module=state.name,
        message=impure_function_calls_message(state.name, calls),
        rule_code=IMPURE_FUNCTION_CALLS,
        filename=state.filename,
        line=state.line,
        details=calls,
    )


def _inherits_purity(state: ModuleState, registry: Mapping[str, ModuleState]) -> bool:
    current = state
    while not current.marked_pure:
        parent = registry.get(parent_name(current.name))
        if parent is None or parent.filename != current.filename:
            return False
        current = parent
    return current is state or not current.protocol


def pure_definitions(registry: Mapping[str, ModuleState]) -> frozenset[str]:
    """Project names accepted as pure dependencies.

    Every definition marked pure (forced modules and protocols included). A
    class that is not marked is pure when the nearest marked definition
    enclosing it in the same file is; that definition's dependencies and
    calls include the class body. Protocols pass nothing on to classes
    nested in them.
    """
    return frozenset(name for name, state in registry.items() if _inherits_purity(state, registry))


def classify(registry: Mapping[str, ModuleState], lib_mods: Iterable[str]) -> list[Diagnostic]:
    """Check every module marked pure against its dependencies and calls.

    Args:
        registry: Complete project registry
        lib_mods: Configured pure library entries (stdlib plus extra)

    Returns:
        Diagnostics ordered by module name; for one module the impure
        dependencies come before the impure calls
    """
    library = tuple(lib_mods)
    pure_modules = {name: state for name, state in registry.items() if state.marked_pure}
    project_mods = pure_definitions(registry)

    checked = [pure_modules[name] for name in sorted(pure_modules) if not pure_modules[name].force]
    findings = (
        finding
        for state in checked
        for finding in (
            _impure_dependencies_diagnostic(state, project_mods, library),
            _impure_function_calls_diagnostic(state),
        )
    )
    return [finding for finding in findings if finding is not None]


def duplicate_diagnostics(collisions: Iterable[Collision]) -> list[Diagnostic]:
    """One diagnostic per overwritten definition, located at the surviving one."""
    return [
        Diagnostic(
            module=collision.name,
            message=duplicate_module_message(
                collision.name,
                (
                    f"{collision.overwritten.filename}:{collision.overwritten.line}",
                    f"{collision.winner.filename}:{collision.winner.line}",
                ),
            ),
            rule_code=DUPLICATE_MODULE,
            filename=collision.winner.filename,
            line=collision.winner.line,
        )
        for collision in collisions
    ]
