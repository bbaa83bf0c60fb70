from __future__ import annotations

import hashlib
from typing import Iterator, Optional, Tuple

from togglestack.core.stats import StatsReceiver

from .maps import ToggleMap
from .models import ToggleMetadata


def checksum(toggle_map: ToggleMap) -> int:
    """Stable 32-bit digest of every (id, fraction) the map defines."""
    items = sorted((md.id, md.fraction) for md in toggle_map.iter_metadata())
    digest = hashlib.sha256(repr(items).encode("utf-8")).hexdigest()
    return int(digest[:8], 16)


class ObservedToggleMap(ToggleMap):
    """Wraps a map and records lookup outcomes on a stats receiver.

    Each ``get`` increments ``<id>/defined`` or ``<id>/undefined``; a
    ``checksum`` gauge tracks the current set of defined toggles so that
    configuration drift between instances is visible.
    """

    def __init__(self, underlying: ToggleMap, stats: StatsReceiver) -> None:
        self.underlying = underlying
        self.stats = stats
        stats.add_gauge("checksum", fn=lambda: float(checksum(underlying)))

    def get(self, toggle_id: str) -> Optional[ToggleMetadata]:
        md = self.underlying.get(toggle_id)
        outcome = "defined" if md is not None else "undefined"
        self.stats.counter(toggle_id, outcome).incr()
        return md

    def iter_metadata(self) -> Iterator[ToggleMetadata]:
        return self.underlying.iter_metadata()

    def layers(self) -> Tuple[ToggleMap, ...]:
        """Return the layers of the wrapped chain, highest precedence first."""
        return self.underlying.components()

    def __repr__(self) -> str:
        return f"ObservedToggleMap({self.underlying!r})"


__all__ = ["ObservedToggleMap", "checksum"]
