"""
Result type for explicit error handling at the checker's boundaries.

Loading configuration and parsing source files are the only places where the
checker touches the outside world. Both return a ``Result`` so the runner can
report a failure and carry on instead of unwinding through the analysis.

Usage:
    >>> match load_config(Path(".")):
    ...     case Success(config):
    ...         report = check_paths(config.paths, config)
    ...     case Failure(error):
    ...         print(f"Error: {error}")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar


T = TypeVar("T")
E = TypeVar("E")
F = TypeVar("F")


@dataclass(frozen=True)
class Success(Generic[T]):
    """Represents a successful result containing a value of type T."""

    value: T

    def map_error(self, f: Callable[[E], F]) -> Result[T, F]:
        """No-op on Success."""
        result: Result[T, F] = Success(self.value)
        return result


@dataclass(frozen=True)
class Failure(Generic[E]):
    """Represents a failed result containing an error of type E."""

    error: E

    def map_error(self, f: Callable[[E], F]) -> Result[T, F]:
        """Map the error value through function f."""
        return Failure(f(self.error))


Result = Success[T] | Failure[E]


def partition_results(
    results: list[Result[T, E]],
) -> tuple[list[T], list[E]]:
    """
    Partition a list of Results into successes and failures.

    Args:
        results: List of Result values to partition

    Returns:
        Tuple of (successes, failures), each in input order
    """
    successes: list[T] = [result.value for result in results if isinstance(result, Success)]
    failures: list[E] = [result.error for result in results if isinstance(result, Failure)]
    return (successes, failures)


__all__ = ["Failure", "Result", "Success", "partition_results"]
