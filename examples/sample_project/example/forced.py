"""Forced pure: never checked."""

import subprocess

import pure_module_check

pure_module_check.pure_module(force=True)


def run() -> int:
    return subprocess.call(["true"])
