"""Tests for whole-project runs: merge, cross-module purity and collisions."""

from __future__ import annotations

from pathlib import Path

from pure_module_check.config import PureModuleConfig
from pure_module_check.messages import DUPLICATE_MODULE, IMPURE_DEPENDENCIES, IMPURE_FUNCTION_CALLS
from pure_module_check.registry import CollectedModules, merge_registries
from pure_module_check.runner import check_paths
from pure_module_check.state import ModuleState
from tests.helpers import WriteModule, collect_states, run_sources

PURE_HEADER = "import pure_module_check\npure_module_check.pure_module()\n"


class TestCrossModulePurity:
    def test_pure_module_without_impure_dependencies(self) -> None:
        report = run_sources(
            {"app.calc": PURE_HEADER + "import math\n\ndef area(r: float) -> float:\n    return math.pi * r * r\n"}
        )
        assert report.passed
        assert report.files_checked == 1

    def test_dependency_on_unmarked_project_module(self) -> None:
        report = run_sources(
            {
                "app.calc": PURE_HEADER + "from app import io_utils\n\ndef f() -> None:\n    io_utils.read()\n",
                "app.io_utils": "import os\n\ndef read() -> str:\n    return os.getcwd()\n",
            }
        )
        assert [(d.module, d.rule_code, d.details) for d in report.diagnostics] == [
            ("app.calc", IMPURE_DEPENDENCIES, ("app.io_utils",))
        ]

    def test_non_fixpoint_classification(self) -> None:
        """A only depends on B; B is marked pure but impure itself."""
        report = run_sources(
            {
                "app.a": PURE_HEADER + "from app import b\n\ndef f() -> int:\n    return b.g()\n",
                "app.b": PURE_HEADER + "import socket\n\ndef g() -> int:\n    return socket.SOMAXCONN\n",
            }
        )
        assert [d.module for d in report.diagnostics] == ["app.b"]

    def test_aliased_dependency_reported_by_long_name(self) -> None:
        report = run_sources(
            {"app.a": PURE_HEADER + "import xml.etree.ElementTree as ET\n\ndef f() -> None:\n    ET.parse('x')\n"}
        )
        assert report.diagnostics[0].details == ("xml.etree.ElementTree",)

    def test_wildcard_extra_pure_mods(self) -> None:
        config = PureModuleConfig(extra_pure_mods=("app.domain.*",))
        report = run_sources(
            {
                "app.a": PURE_HEADER
                + "import app.domain.money\nimport app.domainx\n\n"
                "def f() -> None:\n    app.domain.money.add()\n"
            },
            config,
        )
        assert report.diagnostics[0].details == ("app.domainx",)

    def test_impure_function_calls_diagnostic(self) -> None:
        report = run_sources(
            {
                "app.a": PURE_HEADER
                + "from datetime import datetime\n\n"
                "def f() -> datetime:\n    return datetime.now()\n\n"
                "def g(text: str) -> datetime:\n    return datetime.fromisoformat(text)\n"
            }
        )
        assert [(d.rule_code, d.details) for d in report.diagnostics] == [
            (IMPURE_FUNCTION_CALLS, ("datetime.now",))
        ]

    def test_forced_module_not_flagged(self) -> None:
        report = run_sources(
            {
                "app.a": "import pure_module_check\nimport os\n"
                "pure_module_check.pure_module(force=True)\n\n"
                "def f() -> str:\n    return os.getcwd()\n"
            }
        )
        assert report.passed

    def test_protocol_is_a_pure_dependency(self) -> None:
        """A protocol imported by name clears the dependency; its file is not marked."""
        report = run_sources(
            {
                "app.shapes": "from typing import Protocol\n\nclass Shape(Protocol):\n    def area(self) -> float: ...\n",
                "app.a": PURE_HEADER
                + "from app.shapes import Shape\n\n"
                "def total(items: list[Shape]) -> float:\n"
                "    return Shape.area(items[0])\n",
            }
        )
        assert report.passed
        assert report.registry["app.a"].dependencies == {"app.shapes.Shape"}

    def test_importing_the_file_depends_on_the_file(self) -> None:
        report = run_sources(
            {
                "app.shapes": "from typing import Protocol\n\nclass Shape(Protocol):\n    def area(self) -> float: ...\n",
                "app.a": PURE_HEADER + "from app import shapes\n",
            }
        )
        assert [d.details for d in report.diagnostics] == [("app.shapes",)]

    def test_class_of_pure_module_is_pure(self) -> None:
        report = run_sources(
            {
                "app.money": PURE_HEADER + "class Money:\n    pass\n",
                "app.a": PURE_HEADER + "from app.money import Money\n",
            }
        )
        assert report.passed

    def test_class_of_unmarked_module_is_impure(self) -> None:
        report = run_sources(
            {
                "app.models": "class Model:\n    pass\n",
                "app.a": PURE_HEADER + "from app.models import Model\n",
            }
        )
        assert [d.details for d in report.diagnostics] == [("app.models.Model",)]

    def test_impure_call_in_method_of_pure_module(self) -> None:
        report = run_sources(
            {
                "app.a": PURE_HEADER
                + "from datetime import datetime\n\n"
                "class Clock:\n    def stamp(self) -> datetime:\n        return datetime.now()\n"
            }
        )
        assert [(d.module, d.rule_code, d.details) for d in report.diagnostics] == [
            ("app.a", IMPURE_FUNCTION_CALLS, ("datetime.now",))
        ]


class TestMerge:
    def test_parallel_merge_matches_sequential_registry(self) -> None:
        """Merging per-file registries equals walking both into one."""
        first = collect_states(PURE_HEADER, "app.a")
        second = collect_states(PURE_HEADER + "import os\n", "app.b")
        merged = merge_registries([CollectedModules(registry=first), CollectedModules(registry=second)])

        assert dict(merged.registry) == {**first, **second}
        assert merged.collisions == ()

    def test_duplicate_module_last_wins(self) -> None:
        older = ModuleState(name="app.a", filename="one.py", line=1, marked_pure=True)
        newer = ModuleState(name="app.a", filename="two.py", line=1)
        merged = merge_registries(
            [CollectedModules(registry={"app.a": older}), CollectedModules(registry={"app.a": newer})]
        )

        assert merged.registry["app.a"] == newer
        assert len(merged.collisions) == 1

    def test_duplicates_reported_when_enabled(self) -> None:
        code = "class Compat:\n    pass\n\nclass Compat:\n    pass\n"
        quiet = run_sources({"app.a": code})
        loud = run_sources({"app.a": code}, PureModuleConfig(report_duplicate_modules=True))

        assert quiet.passed
        assert len(quiet.collisions) == 1
        assert [d.rule_code for d in loud.diagnostics] == [DUPLICATE_MODULE]


class TestCheckPaths:
    def test_unparsable_files_are_skipped(self, tmp_path: Path, write_module: WriteModule) -> None:
        write_module("app.good", PURE_HEADER + "import os\n")
        write_module("app.bad", "def broken(:\n")

        report = check_paths([tmp_path], PureModuleConfig())

        assert report.files_checked == 2
        assert [failure.path.name for failure in report.skipped] == ["bad.py"]
        assert [(d.module, d.details) for d in report.diagnostics] == [("app.good", ("os",))]
