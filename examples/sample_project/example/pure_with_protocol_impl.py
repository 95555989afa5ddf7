"""Implements a protocol from a pure module."""

from dataclasses import dataclass

import pure_module_check

from example import shapes

pure_module_check.pure_module()


@dataclass(frozen=True)
class Field:
    name: str

    def describe(self) -> str:
        return self.name


def describe_all(items: list[shapes.Describable]) -> list[str]:
    return [item.describe() for item in items]
