"""Toggle maps: read-only lookups from toggle id to :class:`ToggleMetadata`.

Layering model (highest precedence first) used by ``standard_toggle_map``:

1. ``MutableToggleMap``: in-process overrides owned by the caller
2. ``FlagToggleMap``: process-wide overrides
3. service-owner JSON config
4. dynamically loaded providers (``ServiceLoadedToggleMap``)
5. library-owner JSON config

A lookup walks the layers in order and returns the first layer's metadata
for the id. Nothing is merged across layers.
"""
from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Dict, Iterable, Iterator, Optional, Sequence, Tuple

from .ids import validate_fraction, validate_id
from .models import ToggleMetadata


class ToggleMap(ABC):
    """Abstract read-only toggle lookup."""

    @abstractmethod
    def get(self, toggle_id: str) -> Optional[ToggleMetadata]:
        """Return the metadata for ``toggle_id``, or None when undefined."""

    @abstractmethod
    def iter_metadata(self) -> Iterator[ToggleMetadata]:
        """Yield metadata for every toggle this map defines."""

    def __contains__(self, toggle_id: object) -> bool:
        return isinstance(toggle_id, str) and self.get(toggle_id) is not None

    def __iter__(self) -> Iterator[ToggleMetadata]:
        return self.iter_metadata()

    @property
    def is_empty(self) -> bool:
        return next(self.iter_metadata(), None) is None

    def components(self) -> Tuple["ToggleMap", ...]:
        """Return the underlying layers (a plain map is its own only layer)."""
        return (self,)


class NullToggleMap(ToggleMap):
    """A map that defines nothing. Used where no config was found."""

    def get(self, toggle_id: str) -> Optional[ToggleMetadata]:
        return None

    def iter_metadata(self) -> Iterator[ToggleMetadata]:
        return iter(())

    def __repr__(self) -> str:
        return "NullToggleMap"


NULL_TOGGLE_MAP = NullToggleMap()


def is_null(toggle_map: ToggleMap) -> bool:
    return isinstance(toggle_map, NullToggleMap)


class ImmutableToggleMap(ToggleMap):
    """A fixed set of toggles, e.g. one parsed JSON config resource."""

    def __init__(self, metadata: Iterable[ToggleMetadata], *, source: str = "") -> None:
        toggles: Dict[str, ToggleMetadata] = {}
        for md in metadata:
            if md.id in toggles:
                raise ValueError(f"Duplicate toggle id {md.id!r} in {source or 'toggle map'}")
            toggles[md.id] = md
        self._toggles = toggles
        self.source = source

    def get(self, toggle_id: str) -> Optional[ToggleMetadata]:
        return self._toggles.get(toggle_id)

    def iter_metadata(self) -> Iterator[ToggleMetadata]:
        return iter(list(self._toggles.values()))

    def __len__(self) -> int:
        return len(self._toggles)

    def __repr__(self) -> str:
        return f"ImmutableToggleMap(source={self.source!r}, toggles={len(self._toggles)})"


class MutableToggleMap(ToggleMap):
    """In-process overrides that may change over the life of the process.

    Writers copy the current dict and swap in the new one under a lock, so
    readers always see a consistent snapshot without taking the lock.
    """

    def __init__(self, *, source: str = "mutable") -> None:
        self.source = source
        self._lock = threading.Lock()
        self._toggles: Dict[str, ToggleMetadata] = {}

    def put(self, toggle_id: str, fraction: float, *, description: Optional[str] = None) -> None:
        validate_id(toggle_id)
        value = validate_fraction(toggle_id, fraction)
        md = ToggleMetadata(toggle_id, value, description, self.source)
        with self._lock:
            updated = dict(self._toggles)
            updated[toggle_id] = md
            self._toggles = updated

    def remove(self, toggle_id: str) -> None:
        with self._lock:
            if toggle_id not in self._toggles:
                return
            updated = dict(self._toggles)
            del updated[toggle_id]
            self._toggles = updated

    def clear(self) -> None:
        with self._lock:
            self._toggles = {}

    def get(self, toggle_id: str) -> Optional[ToggleMetadata]:
        return self._toggles.get(toggle_id)

    def iter_metadata(self) -> Iterator[ToggleMetadata]:
        return iter(list(self._toggles.values()))

    def __repr__(self) -> str:
        return f"MutableToggleMap(toggles={len(self._toggles)})"


class StackedToggleMap(ToggleMap):
    """Ordered composition of toggle maps, highest precedence first.

    Nested stacks are flattened so ``components()`` always reports the leaf
    layers in lookup order.
    """

    def __init__(self, layers: Sequence[ToggleMap]) -> None:
        flattened = []
        for layer in layers:
            flattened.extend(layer.components())
        self._layers: Tuple[ToggleMap, ...] = tuple(flattened)

    @classmethod
    def of(cls, *maps: ToggleMap) -> "StackedToggleMap":
        return cls(maps)

    def get(self, toggle_id: str) -> Optional[ToggleMetadata]:
        for layer in self._layers:
            md = layer.get(toggle_id)
            if md is not None:
                return md
        return None

    def iter_metadata(self) -> Iterator[ToggleMetadata]:
        seen = set()
        for layer in self._layers:
            for md in layer.iter_metadata():
                if md.id in seen:
                    continue
                seen.add(md.id)
                yield md

    def components(self) -> Tuple[ToggleMap, ...]:
        return self._layers

    def __repr__(self) -> str:
        inner = ", ".join(repr(layer) for layer in self._layers)
        return f"StackedToggleMap({inner})"


def stack(
    mutable: ToggleMap,
    flags: ToggleMap,
    service_config: ToggleMap,
    dynamic: ToggleMap,
    library_config: ToggleMap,
) -> StackedToggleMap:
    """Build the standard precedence chain.

    Operators own the first three layers (in-process overrides, flags and the
    service config); library authors own the last two.
    """
    return StackedToggleMap.of(mutable, flags, service_config, dynamic, library_config)


__all__ = [
    "ToggleMap",
    "NullToggleMap",
    "NULL_TOGGLE_MAP",
    "is_null",
    "ImmutableToggleMap",
    "MutableToggleMap",
    "StackedToggleMap",
    "stack",
]
