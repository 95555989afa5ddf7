"""Allow ``python -m pure_module_check``."""

from __future__ import annotations

import sys

from pure_module_check.cli import main

sys.exit(main())
