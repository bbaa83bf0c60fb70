"""Identifier and fraction validation for toggles and library names.

Library names and toggle ids share one character set so that a toggle id can
be namespaced by its library name (``com.example.lib`` owns
``com.example.lib.SomeFeature``) and both can be embedded in resource paths.
"""
from __future__ import annotations

import math
import re
from typing import Any

from togglestack.core.exceptions import InvalidFractionError, InvalidNameError

_ID_RE = re.compile(r"[A-Za-z0-9_.\-]+")


def is_valid_id(value: Any) -> bool:
    return isinstance(value, str) and _ID_RE.fullmatch(value) is not None


def validate_id(toggle_id: Any) -> str:
    """Return ``toggle_id`` unchanged or raise :class:`InvalidNameError`."""
    if not is_valid_id(toggle_id):
        raise InvalidNameError(str(toggle_id), kind="id")
    return toggle_id


def validate_library_name(library_name: Any) -> str:
    """Return ``library_name`` unchanged or raise :class:`InvalidNameError`.

    Names should be fully qualified (e.g. ``com.example.lib``) to avoid
    collisions; uniqueness itself is not checked here.
    """
    if not is_valid_id(library_name):
        raise InvalidNameError(str(library_name), kind="library name")
    return library_name


def validate_fraction(toggle_id: str, fraction: Any) -> float:
    """Coerce ``fraction`` to float and check it is within [0.0, 1.0]."""
    if isinstance(fraction, bool) or not isinstance(fraction, (int, float)):
        raise InvalidFractionError(toggle_id, fraction)
    value = float(fraction)
    if math.isnan(value) or value < 0.0 or value > 1.0:
        raise InvalidFractionError(toggle_id, fraction)
    return value


__all__ = ["is_valid_id", "validate_id", "validate_library_name", "validate_fraction"]
