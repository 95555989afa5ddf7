"""Protocol definitions used by pure modules."""

from typing import Protocol

import pure_module_check

pure_module_check.pure_module()


class Describable(Protocol):
    def describe(self) -> str: ...
