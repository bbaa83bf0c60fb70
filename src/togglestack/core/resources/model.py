from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ResourceRoot:
    """A single directory searched for toggle config resources.

    ``kind`` records where the root came from ("settings", "sys.path" or
    "explicit") for diagnostics.
    """

    kind: str
    path: Path


__all__ = ["ResourceRoot"]
