"""Run the check over a set of source files.

Each file is walked into its own registry. The registries are merged in
file order, and the classifier runs once over the merged result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping

from pure_module_check.classifier import classify, duplicate_diagnostics
from pure_module_check.config import PureModuleConfig
from pure_module_check.errors import SourceParseFailed
from pure_module_check.registry import merge_registries
from pure_module_check.result import partition_results
from pure_module_check.sources import SourceFile, collect_python_files, parse_source
from pure_module_check.state import Collision, Context, Diagnostic, ModuleState
from pure_module_check.walker import class_definitions, collect_module_states

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckReport:
    """Outcome of one run.

    Attributes:
        diagnostics: Findings, in classifier order (duplicates last)
        registry: Merged registry the classifier ran over
        collisions: Overwritten module definitions
        skipped: Files that could not be parsed
        files_checked: Number of files walked
    """

    diagnostics: tuple[Diagnostic, ...] = ()
    registry: Mapping[str, ModuleState] = field(default_factory=lambda: MappingProxyType({}))
    collisions: tuple[Collision, ...] = ()
    skipped: tuple[SourceParseFailed, ...] = ()
    files_checked: int = 0

    @property
    def passed(self) -> bool:
        return not self.diagnostics


def build_context(
    source: SourceFile,
    config: PureModuleConfig,
    project_modules: frozenset[str],
) -> Context:
    """Per-file walker context for ``source``."""
    return Context.create(
        marker=config.pure_mod_marker,
        partial_pure_functions=config.stdlib_partial_pure_mods_impure_functions,
        tree=source.tree,
        module_name=source.module_name,
        package=source.package,
        filename=str(source.path),
        project_modules=project_modules,
    )


def run_on_source_files(
    sources: Iterable[SourceFile],
    config: PureModuleConfig,
) -> CheckReport:
    """Walk every parsed file, merge the registries and classify.

    Args:
        sources: Parsed files, walked in the given order
        config: Checker configuration

    Returns:
        Report with all diagnostics
    """
    files = list(sources)
    project_modules = frozenset(
        name
        for source in files
        for name in (source.module_name, *class_definitions(source.tree, source.module_name))
    )

    merged = merge_registries(
        collect_module_states(build_context(source, config, project_modules)) for source in files
    )
    diagnostics = classify(merged.registry, config.lib_pure_mods)
    if config.report_duplicate_modules:
        diagnostics.extend(duplicate_diagnostics(merged.collisions))

    logger.debug(
        "Checked %d files: %d modules, %d marked pure, %d diagnostics",
        len(files),
        len(merged.registry),
        sum(1 for state in merged.registry.values() if state.marked_pure),
        len(diagnostics),
    )
    return CheckReport(
        diagnostics=tuple(diagnostics),
        registry=merged.registry,
        collisions=merged.collisions,
        files_checked=len(files),
    )


def check_paths(paths: Iterable[Path], config: PureModuleConfig) -> CheckReport:
    """Discover, parse and check every Python file under ``paths``.

    Files that fail to parse are logged, listed in ``skipped`` and left out
    of the registry.
    """
    sources, skipped = partition_results([parse_source(path) for path in collect_python_files(paths)])
    for failure in skipped:
        logger.warning("Skipping unparsable file %s", failure)

    report = run_on_source_files(sources, config)
    return replace(report, skipped=tuple(skipped))
