from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ToggleMetadata:
    """What a single layer knows about one toggle.

    ``fraction`` is the activation decision carried by the layer: the share
    of inputs for which the toggle is on. ``source`` names the layer that
    defined it (e.g. ``"mutable"`` or the JSON resource path).
    """

    id: str
    fraction: float
    description: Optional[str] = None
    source: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "fraction": self.fraction,
            "description": self.description,
            "source": self.source,
        }


__all__ = ["ToggleMetadata"]
