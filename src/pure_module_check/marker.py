"""Runtime side of the purity marker.

The checker only looks for the call in the source; at runtime it does nothing::

    import pure_module_check

    pure_module_check.pure_module()            # checked
    pure_module_check.pure_module(force=True)  # assumed pure, never checked
"""

from __future__ import annotations


def pure_module(*, force: bool = False) -> None:
    """Declare the calling module (or class body) pure. No-op at runtime."""
    del force
