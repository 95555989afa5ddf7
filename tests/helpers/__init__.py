# tests/helpers/__init__.py
"""Shared test utilities for the pure module check test-suite.

Usage:
    >>> from tests.helpers import collect_states, expect_success, run_sources
    >>>
    >>> states = collect_states('''
    ...     import pure_module_check
    ...     pure_module_check.pure_module()
    ... ''')
    >>> assert states["example.mod"].marked_pure
"""

from __future__ import annotations

from tests.helpers.result_utils import expect_failure, expect_success
from tests.helpers.sources import (
    WriteModule,
    collect_states,
    line_of,
    make_context,
    make_source,
    parse_module,
    run_sources,
)

__all__ = [
    "WriteModule",
    "collect_states",
    "expect_failure",
    "expect_success",
    "line_of",
    "make_context",
    "make_source",
    "parse_module",
    "run_sources",
]
