"""Command-line interface for the pure module check.

Usage:
    check-pure-modules [PATHS...] [--config FILE] [--explain RULE] [--verbose]

Examples:
    check-pure-modules                          # Check the configured paths
    check-pure-modules src/myproject/pricing    # Check specific files or directories
    check-pure-modules --explain PMC001         # Show rule details
    check-pure-modules --verbose                # Debug logging and long messages
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pure_module_check.config import config_root, load_config
from pure_module_check.messages import explain_rule, format_diagnostic
from pure_module_check.result import Failure
from pure_module_check.runner import check_paths


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="check-pure-modules",
        description="Check that modules marked pure only depend on pure modules",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  check-pure-modules                        # Check the configured paths
  check-pure-modules src/myproject/pricing  # Check specific files or directories
  check-pure-modules --explain PMC002       # Show rule details

Exit codes:
  0 - No diagnostics
  1 - Diagnostics found
  2 - Configuration error
        """,
    )
    parser.add_argument(
        "paths",
        nargs="*",
        type=Path,
        help=(
            "Files or directories to check "
            "(default: configured paths, relative to the configuration file)"
        ),
    )
    parser.add_argument(
        "--config",
        type=Path,
        metavar="FILE",
        help="TOML file with a [tool.pure-module-check] table (default: nearest pyproject.toml)",
    )
    parser.add_argument(
        "--explain",
        metavar="RULE",
        help="Show detailed explanation for a rule (PMC001, PMC002, PMC003)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging and detailed messages",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the check.

    Returns:
        Exit code (0 = no diagnostics, 1 = diagnostics found, 2 = configuration error)
    """
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.explain:
        print(explain_rule(args.explain))
        return 0

    config_result = load_config(config_file=args.config)
    if isinstance(config_result, Failure):
        print(f"ERROR: Failed to load configuration: {config_result.error}", file=sys.stderr)
        return 2
    config = config_result.value

    paths = args.paths or [config_root(config_file=args.config) / path for path in config.paths]
    report = check_paths(paths, config)

    if report.files_checked == 0 and not report.skipped:
        print("No Python files found to check")
        return 0

    print(f"🔍 Checked {report.files_checked} files for pure module violations...")
    for skipped in report.skipped:
        print(f"⚪ SKIP: {skipped}")

    for diagnostic in report.diagnostics:
        print(format_diagnostic(diagnostic, verbose=args.verbose))
        if args.verbose:
            print()

    pure_count = sum(1 for state in report.registry.values() if state.marked_pure and not state.protocol)
    print()
    print(f"✅ Found {pure_count} modules marked pure")
    print(f"❌ Found {len(report.diagnostics)} violations")

    if report.diagnostics:
        print()
        print("Run with --verbose for detailed messages and examples:")
        print("  check-pure-modules --verbose")
        return 1

    print()
    print("🎉 No pure module violations found!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
