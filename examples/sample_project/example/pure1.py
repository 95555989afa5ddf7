"""Pure module depending on another module marked pure."""

import collections

import pure_module_check

from example import pure2

pure_module_check.pure_module()


def f2() -> collections.OrderedDict[str, int]:
    return collections.OrderedDict()


def f1() -> int:
    return pure2.f1()
