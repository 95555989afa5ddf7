"""Pure module with a nested pure class and impure calls."""

from datetime import datetime

import pure_module_check

from example import impure1

pure_module_check.pure_module()


class SubModule1:
    pure_module_check.pure_module()

    def f1(self) -> datetime:
        return datetime.now()


def f1() -> str:
    return impure1.f1()


def f2() -> datetime:
    return datetime.now()


def f3() -> dict[str, int]:
    return dict()
