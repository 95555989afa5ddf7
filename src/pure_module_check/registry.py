"""Per-file registries and their merge into the project registry."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from pure_module_check.state import Collision, ModuleState, Registry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CollectedModules:
    """Module states found in one file, or the merge of several files."""

    registry: Mapping[str, ModuleState] = field(default_factory=lambda: MappingProxyType({}))
    collisions: tuple[Collision, ...] = ()


def merge_registries(parts: Iterable[CollectedModules]) -> CollectedModules:
    """Union the per-file registries in order.

    A name defined by more than one file keeps the state of the last file, as
    if the files had been walked one after the other into a single registry.
    Every overwrite is logged and returned as a ``Collision``.
    """
    registry: Registry = {}
    collisions: list[Collision] = []
    for part in parts:
        collisions.extend(part.collisions)
        for name, state in part.registry.items():
            previous = registry.get(name)
            if previous is not None:
                logger.warning(
                    "Module %s is defined in both %s:%d and %s:%d; keeping the latter",
                    name,
                    previous.filename,
                    previous.line,
                    state.filename,
                    state.line,
                )
                collisions.append(Collision(name=name, overwritten=previous, winner=state))
            registry[name] = state
    return CollectedModules(registry=MappingProxyType(registry), collisions=tuple(collisions))
