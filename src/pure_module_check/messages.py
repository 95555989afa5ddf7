"""Message templates for pure-module diagnostics.

Provides the diagnostic texts and detailed explanations with before/after
examples for each PMC rule.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from pure_module_check.state import Diagnostic


@dataclass(frozen=True)
class RuleMessage:
    """Explanation template for a rule."""

    code: str
    short_message: str
    long_message: str
    before_example: str
    after_example: str


IMPURE_DEPENDENCIES = "PMC001"
IMPURE_FUNCTION_CALLS = "PMC002"
DUPLICATE_MODULE = "PMC003"

# PMC001: Pure module depends on an impure module
PMC001_MESSAGE = RuleMessage(
    code=IMPURE_DEPENDENCIES,
    short_message="pure module has impure dependencies",
    long_message=(
        "A module marked with the purity marker may only depend on:\n"
        "  - modules listed in stdlib_pure_mods or extra_pure_mods (exact or `pkg.*`)\n"
        "  - other modules of the project that are marked pure\n"
        "  - protocol definitions\n"
        "Mark the dependency pure, move the impure code out of the module, or\n"
        "list a trusted library in extra_pure_mods."
    ),
    before_example=(
        "# ❌ FLAGGED\n"
        "import pure_module_check\n"
        "import os\n\n"
        "pure_module_check.pure_module()\n\n"
        "def config_dir() -> str:\n"
        "    return os.getcwd()"
    ),
    after_example=(
        "# ✅ CORRECT - pass the value in\n"
        "import pure_module_check\n\n"
        "pure_module_check.pure_module()\n\n"
        "def config_dir(cwd: str) -> str:\n"
        "    return cwd"
    ),
)

# PMC002: Pure module calls an impure function of a partially pure module
PMC002_MESSAGE = RuleMessage(
    code=IMPURE_FUNCTION_CALLS,
    short_message="pure module calls impure functions",
    long_message=(
        "Some library modules are pure except for a few functions, listed in\n"
        "stdlib_partial_pure_mods_impure_functions. By default these are the\n"
        "clock readings datetime.now, datetime.utcnow and datetime.today.\n"
        "Calling one of them makes the result depend on when it runs."
    ),
    before_example=(
        "# ❌ FLAGGED\n"
        "from datetime import datetime\n\n"
        "def is_expired(deadline: datetime) -> bool:\n"
        "    return datetime.now() > deadline"
    ),
    after_example=(
        "# ✅ CORRECT - take the current time as an argument\n"
        "from datetime import datetime\n\n"
        "def is_expired(deadline: datetime, now: datetime) -> bool:\n"
        "    return now > deadline"
    ),
)

# PMC003: Two definitions share one fully-qualified name
PMC003_MESSAGE = RuleMessage(
    code=DUPLICATE_MODULE,
    short_message="module defined more than once",
    long_message=(
        "Module states are keyed by fully-qualified name. When two definitions\n"
        "share a name only the last one is checked. Reported only when\n"
        "report_duplicate_modules is enabled."
    ),
    before_example=(
        "# ❌ FLAGGED\n"
        "if sys.version_info >= (3, 12):\n"
        "    class Compat: ...\n"
        "else:\n"
        "    class Compat: ..."
    ),
    after_example=(
        "# ✅ CORRECT - a single definition\n"
        "class Compat:\n"
        "    ..."
    ),
)

RULE_MESSAGES: dict[str, RuleMessage] = {
    IMPURE_DEPENDENCIES: PMC001_MESSAGE,
    IMPURE_FUNCTION_CALLS: PMC002_MESSAGE,
    DUPLICATE_MODULE: PMC003_MESSAGE,
}


def _render(items: Iterable[str]) -> str:
    return repr(list(items))


def impure_dependencies_message(module: str, dependencies: Iterable[str]) -> str:
    return f"Module {module} marked as pure but has impure dependencies: {_render(dependencies)}"


def impure_function_calls_message(module: str, calls: Iterable[str]) -> str:
    return f"Module {module} marked as pure but calls impure functions: {_render(calls)}"


def duplicate_module_message(module: str, locations: Iterable[str]) -> str:
    return f"Module {module} is defined more than once: {_render(locations)}"


def format_diagnostic(diagnostic: Diagnostic, verbose: bool = False) -> str:
    """Format a diagnostic for the console.

    Args:
        diagnostic: Diagnostic to format
        verbose: If True, include the rule's long message and examples

    Returns:
        ``file:line - message (CODE)``, followed by the explanation when verbose
    """
    output = f"{diagnostic.filename}:{diagnostic.line} - {diagnostic.message} ({diagnostic.rule_code})"

    message = RULE_MESSAGES.get(diagnostic.rule_code)
    if verbose and message:
        output += f"\n\n{message.long_message}"
        output += f"\n\nBefore:\n{message.before_example}"
        output += f"\n\nAfter:\n{message.after_example}"

    return output


def explain_rule(rule_code: str) -> str:
    """Get detailed explanation for a rule.

    Args:
        rule_code: Rule code (PMC001, PMC002, PMC003)

    Returns:
        Detailed explanation with examples
    """
    message = RULE_MESSAGES.get(rule_code.upper())
    if not message:
        return f"Unknown rule: {rule_code}"

    return (
        f"Rule {message.code}: {message.short_message}\n"
        f"\n{message.long_message}"
        f"\n\nBefore:\n{message.before_example}"
        f"\n\nAfter:\n{message.after_example}"
    )
