"""Toggle maps and their building blocks."""
from __future__ import annotations

from .flags import FlagOverrides, FlagToggleMap, get_process_flags
from .ids import validate_fraction, validate_id, validate_library_name
from .json_map import DescriptionMode, JsonToggleMap
from .maps import (
    NULL_TOGGLE_MAP,
    ImmutableToggleMap,
    MutableToggleMap,
    NullToggleMap,
    StackedToggleMap,
    ToggleMap,
    is_null,
    stack,
)
from .models import ToggleMetadata
from .observed import ObservedToggleMap, checksum

__all__ = [
    "ToggleMap",
    "ToggleMetadata",
    "NullToggleMap",
    "NULL_TOGGLE_MAP",
    "is_null",
    "ImmutableToggleMap",
    "MutableToggleMap",
    "StackedToggleMap",
    "stack",
    "ObservedToggleMap",
    "checksum",
    "FlagOverrides",
    "FlagToggleMap",
    "get_process_flags",
    "JsonToggleMap",
    "DescriptionMode",
    "validate_id",
    "validate_library_name",
    "validate_fraction",
]
