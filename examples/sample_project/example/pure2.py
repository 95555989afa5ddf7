"""Marked pure, but reads the working directory."""

import os

import pure_module_check

pure_module_check.pure_module()


def f1() -> int:
    return len(os.getcwd())
