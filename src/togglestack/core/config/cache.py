"""Centralized settings caching.

Provides a single source of truth for loaded settings across all domain
configs. The cache key fingerprints everything a load depends on (settings
file path and mtime, ``TOGGLESTACK_*`` environment variables), so edits are
picked up without explicit invalidation.
"""
from __future__ import annotations

import hashlib
import threading
from typing import Any, Callable, Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .manager import ConfigManager

_config_cache: Dict[str, Dict[str, Any]] = {}
_cache_clearers: Dict[str, Callable[[], None]] = {}
_cache_lock = threading.Lock()


def _cache_key(manager: "ConfigManager") -> str:
    env_items = sorted(
        (k, v) for k, v in manager.environ.items() if k.startswith("TOGGLESTACK_")
    )
    env_fp = hashlib.sha256(repr(env_items).encode("utf-8")).hexdigest()[:12]

    settings_file = manager.settings_file
    file_fp = "none"
    if settings_file is not None:
        try:
            st = settings_file.stat()
            file_fp = f"{settings_file.resolve()}:{st.st_mtime_ns}:{st.st_size}"
        except OSError:
            file_fp = f"{settings_file}:missing"

    return f"file={file_fp}:env={env_fp}"


def get_cached_config(manager: Optional["ConfigManager"] = None) -> Dict[str, Any]:
    """Get settings with caching.

    Returns the same dict instance while the fingerprint is unchanged.
    Treat the result as immutable.
    """
    if manager is None:
        # Lazy import to avoid circular dependency
        from .manager import ConfigManager

        manager = ConfigManager()

    key = _cache_key(manager)
    with _cache_lock:
        cached = _config_cache.get(key)
    if cached is not None:
        return cached

    # IMPORTANT: call the uncached loader to avoid recursion
    loaded = manager._load_config_uncached()
    with _cache_lock:
        return _config_cache.setdefault(key, loaded)


def clear_all_caches() -> None:
    """Clear the settings cache and every registered derived cache."""
    with _cache_lock:
        _config_cache.clear()
    for clearer in list(_cache_clearers.values()):
        clearer()


def register_cache_clearer(name: str, clearer: Callable[[], None]) -> None:
    """Register an additional cache clearer to run inside `clear_all_caches()`."""
    _cache_clearers[name] = clearer


def is_cached(manager: "ConfigManager") -> bool:
    with _cache_lock:
        return _cache_key(manager) in _config_cache


__all__ = [
    "get_cached_config",
    "clear_all_caches",
    "register_cache_clearer",
    "is_cached",
]
