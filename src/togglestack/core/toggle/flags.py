"""Process-wide toggle overrides.

Operators can force toggle fractions for the whole process, either through
settings (``flags.overrides``) or the ``TOGGLESTACK_TOGGLE_OVERRIDES``
environment variable::

    TOGGLESTACK_TOGGLE_OVERRIDES="com.example.lib.NewThing=1.0,com.example.lib.Old=0"

Entries from the environment variable win over settings entries with the
same id. The overrides are an explicit object (:class:`FlagOverrides`);
:func:`get_process_flags` holds the single per-process instance built from
settings.
"""
from __future__ import annotations

import os
import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional

from togglestack.core.config.cache import register_cache_clearer
from togglestack.core.exceptions import InvalidFractionError

from .ids import validate_fraction, validate_id
from .maps import ToggleMap
from .models import ToggleMetadata

OVERRIDES_ENV_VAR = "TOGGLESTACK_TOGGLE_OVERRIDES"


def parse_overrides(raw: str) -> Dict[str, float]:
    """Parse ``id=fraction`` pairs separated by commas.

    Raises:
        InvalidNameError: For a malformed id.
        InvalidFractionError: For a missing, non-numeric or out of range fraction.
    """
    parsed: Dict[str, float] = {}
    for chunk in raw.split(","):
        item = chunk.strip()
        if not item:
            continue
        toggle_id, sep, value = item.partition("=")
        toggle_id = validate_id(toggle_id.strip())
        if not sep:
            raise InvalidFractionError(toggle_id, None)
        try:
            number = float(value.strip())
        except ValueError as exc:
            raise InvalidFractionError(toggle_id, value.strip()) from exc
        parsed[toggle_id] = validate_fraction(toggle_id, number)
    return parsed


@dataclass(frozen=True)
class FlagOverrides:
    """Immutable snapshot of process-wide toggle overrides."""

    overrides: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        checked = {validate_id(k): validate_fraction(k, v) for k, v in dict(self.overrides).items()}
        object.__setattr__(self, "overrides", MappingProxyType(checked))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "FlagOverrides":
        env = os.environ if environ is None else environ
        return cls(parse_overrides(env.get(OVERRIDES_ENV_VAR, "")))

    @classmethod
    def from_settings(
        cls,
        settings_overrides: Optional[Mapping[str, float]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "FlagOverrides":
        merged: Dict[str, float] = dict(settings_overrides or {})
        merged.update(cls.from_env(environ).overrides)
        return cls(merged)


class FlagToggleMap(ToggleMap):
    """Toggle map view over a :class:`FlagOverrides` snapshot."""

    def __init__(self, flags: FlagOverrides, *, source: str = "flags") -> None:
        self.flags = flags
        self.source = source

    def get(self, toggle_id: str) -> Optional[ToggleMetadata]:
        fraction = self.flags.overrides.get(toggle_id)
        if fraction is None:
            return None
        return ToggleMetadata(toggle_id, fraction, None, self.source)

    def iter_metadata(self) -> Iterator[ToggleMetadata]:
        for toggle_id, fraction in self.flags.overrides.items():
            yield ToggleMetadata(toggle_id, fraction, None, self.source)

    def __repr__(self) -> str:
        return f"FlagToggleMap(toggles={len(self.flags.overrides)})"


_process_flags: Optional[FlagToggleMap] = None
_process_flags_lock = threading.Lock()


def get_process_flags() -> FlagToggleMap:
    """Return the per-process flag map, building it from settings on first use."""
    global _process_flags
    with _process_flags_lock:
        if _process_flags is None:
            # Lazy import to avoid circular dependencies
            from togglestack.core.config.domains import FlagsConfig

            overrides = FlagOverrides.from_settings(FlagsConfig().overrides)
            _process_flags = FlagToggleMap(overrides)
        return _process_flags


def reset_process_flags() -> None:
    """Test-only: drop the cached per-process flag map."""
    global _process_flags
    with _process_flags_lock:
        _process_flags = None


register_cache_clearer("process_flags", reset_process_flags)


__all__ = [
    "OVERRIDES_ENV_VAR",
    "parse_overrides",
    "FlagOverrides",
    "FlagToggleMap",
    "get_process_flags",
    "reset_process_flags",
]
