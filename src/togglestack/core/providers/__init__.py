"""Dynamic toggle map providers."""
from __future__ import annotations

from .registry import (
    ENTRY_POINT_GROUP,
    ProviderRegistry,
    ServiceLoadedToggleMap,
    get_default_registry,
)

__all__ = ["ENTRY_POINT_GROUP", "ProviderRegistry", "ServiceLoadedToggleMap", "get_default_registry"]
