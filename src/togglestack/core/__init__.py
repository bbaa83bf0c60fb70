"""Core toggle resolution for togglestack.

Public entry points are re-exported here for convenience:

    from togglestack.core import standard_toggle_map, MutableToggleMap

    mutable = MutableToggleMap()
    toggles = standard_toggle_map("com.example.lib", stats, mutable=mutable)
    toggles.get("com.example.lib.NewThing")
"""
from __future__ import annotations

from .exceptions import (
    AmbiguousConfigError,
    AmbiguousProviderError,
    ConfigParseError,
    InvalidFractionError,
    InvalidNameError,
    ResourceLookupError,
    TogglesError,
)
from .server_info import ServerInfo
from .standard import standard_toggle_map
from .stats import InMemoryStatsReceiver, NullStatsReceiver, StatsReceiver
from .toggle import (
    NULL_TOGGLE_MAP,
    ImmutableToggleMap,
    MutableToggleMap,
    StackedToggleMap,
    ToggleMap,
    ToggleMetadata,
)

__all__ = [
    "standard_toggle_map",
    "ServerInfo",
    "StatsReceiver",
    "NullStatsReceiver",
    "InMemoryStatsReceiver",
    "ToggleMap",
    "ToggleMetadata",
    "NULL_TOGGLE_MAP",
    "ImmutableToggleMap",
    "MutableToggleMap",
    "StackedToggleMap",
    "TogglesError",
    "InvalidNameError",
    "InvalidFractionError",
    "AmbiguousConfigError",
    "AmbiguousProviderError",
    "ConfigParseError",
    "ResourceLookupError",
]
