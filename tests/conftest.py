# tests/conftest.py
"""Global PyTest fixtures for the test-suite."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from tests.helpers import WriteModule

REPO_ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture(scope="session")
def sample_project() -> Path:
    """Directory holding the bundled ``example`` package."""
    return REPO_ROOT / "examples" / "sample_project"


@pytest.fixture
def write_module(tmp_path: Path) -> WriteModule:
    """Factory writing dotted module names as files under ``tmp_path``."""

    def _write(module_name: str, code: str = "") -> Path:
        *packages, stem = module_name.split(".")
        directory = tmp_path
        for package in packages:
            directory = directory / package
            directory.mkdir(exist_ok=True)
            init = directory / "__init__.py"
            if not init.exists():
                init.write_text("", encoding="utf-8")
        path = directory / f"{stem}.py"
        path.write_text(textwrap.dedent(code), encoding="utf-8")
        return path

    return _write
