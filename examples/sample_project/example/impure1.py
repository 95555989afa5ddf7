"""Not marked pure."""

import os


def f1() -> str:
    return os.environ.get("HOME", "")
