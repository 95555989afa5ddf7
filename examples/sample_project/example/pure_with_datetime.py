"""Uses only the pure parts of datetime."""

from datetime import datetime

import pure_module_check

pure_module_check.pure_module()


def f1() -> datetime | None:
    if 1 == 2:
        return datetime.fromisoformat("2020-01-01T00:00:00")
    return None


def f2() -> None:
    # datetime.now()
    pass
