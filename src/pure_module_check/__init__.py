"""Static check that modules marked pure only depend on pure modules.

A module opts in by calling the marker at module (or class) level::

    import pure_module_check

    pure_module_check.pure_module()

The checker then verifies that every module it imports or calls into is a
configured pure library module, another module marked pure, or a protocol,
and that it never calls a known-impure function such as ``datetime.now``.
"""

from __future__ import annotations

from pure_module_check.classifier import classify, is_pure_dependency
from pure_module_check.config import PureModuleConfig, load_config
from pure_module_check.marker import pure_module
from pure_module_check.runner import CheckReport, check_paths, run_on_source_files
from pure_module_check.state import Diagnostic, ModuleState

__all__ = [
    "CheckReport",
    "Diagnostic",
    "ModuleState",
    "PureModuleConfig",
    "check_paths",
    "classify",
    "is_pure_dependency",
    "load_config",
    "pure_module",
    "run_on_source_files",
]
