"""Dynamically loaded toggle maps.

Installed packages contribute toggle maps for a library through the
``togglestack.toggle_maps`` entry point group::

    [project.entry-points."togglestack.toggle_maps"]
    mylib = "mylib.toggles:MyLibToggleMap"

The target is a :class:`ServiceLoadedToggleMap` subclass (instantiated with
no arguments), an instance, or a zero-argument factory returning one. Hosts
can also register providers explicitly. At most one provider may claim a
given library name.
"""
from __future__ import annotations

import inspect
import logging
import threading
from importlib.metadata import entry_points
from typing import Any, List, Optional, Tuple

from togglestack.core.config.cache import register_cache_clearer
from togglestack.core.exceptions import AmbiguousProviderError, ProviderLoadError
from togglestack.core.toggle.ids import validate_library_name
from togglestack.core.toggle.maps import NULL_TOGGLE_MAP, ToggleMap

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "togglestack.toggle_maps"

Provider = Tuple[str, "ServiceLoadedToggleMap"]


class ServiceLoadedToggleMap(ToggleMap):
    """Base class for toggle maps contributed by installed packages.

    Subclasses set ``library_name`` to the library whose toggles they
    supply.
    """

    library_name: str = ""


def _instantiate(label: str, target: Any) -> ServiceLoadedToggleMap:
    if inspect.isclass(target) or (callable(target) and not isinstance(target, ToggleMap)):
        try:
            target = target()
        except Exception as exc:
            raise ProviderLoadError(
                f"Failed to instantiate toggle map provider {label}: {exc}",
                context={"provider": label},
            ) from exc
    if not isinstance(target, ToggleMap) or not getattr(target, "library_name", ""):
        raise ProviderLoadError(
            f"Toggle map provider {label} must be a ToggleMap with a library_name, got {type(target).__name__}",
            context={"provider": label},
        )
    validate_library_name(target.library_name)
    return target  # type: ignore[return-value]


class ProviderRegistry:
    """Registry of dynamically loaded toggle maps keyed by library name."""

    def __init__(self, *, discover: bool = True, group: str = ENTRY_POINT_GROUP) -> None:
        self.discover = discover
        self.group = group
        self._lock = threading.Lock()
        self._registered: List[Provider] = []
        self._discovered: Optional[List[Provider]] = None

    def register(self, provider: Any, *, label: Optional[str] = None) -> ServiceLoadedToggleMap:
        """Register a provider instance, class, or factory."""
        name = label or getattr(provider, "__qualname__", None) or type(provider).__qualname__
        instance = _instantiate(name, provider)
        with self._lock:
            self._registered.append((name, instance))
        logger.debug("Registered toggle map provider %s for %s", name, instance.library_name)
        return instance

    def clear(self) -> None:
        with self._lock:
            self._registered = []
            self._discovered = None

    def _load_entry_points(self) -> List[Provider]:
        loaded: List[Provider] = []
        for ep in entry_points(group=self.group):
            label = f"{ep.name} ({ep.value})"
            try:
                target = ep.load()
            except Exception as exc:
                raise ProviderLoadError(
                    f"Failed to load toggle map provider {label}: {exc}",
                    context={"provider": label, "group": self.group},
                ) from exc
            loaded.append((label, _instantiate(label, target)))
        logger.debug("Discovered %d toggle map provider(s) in %s", len(loaded), self.group)
        return loaded

    def providers(self) -> List[Provider]:
        """All providers: explicit registrations first, then entry points."""
        with self._lock:
            registered = list(self._registered)
            discovered = self._discovered
        if self.discover and discovered is None:
            discovered = self._load_entry_points()
            with self._lock:
                if self._discovered is None:
                    self._discovered = discovered
                discovered = self._discovered
        return registered + list(discovered or [])

    def lookup(self, library_name: str) -> ToggleMap:
        """Return the single provider for ``library_name``, or ``NULL_TOGGLE_MAP``.

        Raises:
            AmbiguousProviderError: More than one provider claims the name.
        """
        matches = [(label, p) for label, p in self.providers() if p.library_name == library_name]
        if len(matches) > 1:
            raise AmbiguousProviderError(library_name, [label for label, _ in matches])
        if not matches:
            return NULL_TOGGLE_MAP
        return matches[0][1]


_default_registry: Optional[ProviderRegistry] = None
_default_registry_lock = threading.Lock()


def get_default_registry() -> ProviderRegistry:
    """Return the per-process registry (entry point discovery enabled)."""
    global _default_registry
    with _default_registry_lock:
        if _default_registry is None:
            _default_registry = ProviderRegistry()
        return _default_registry


def reset_default_registry() -> None:
    global _default_registry
    with _default_registry_lock:
        _default_registry = None


register_cache_clearer("provider_registry", reset_default_registry)


__all__ = [
    "ENTRY_POINT_GROUP",
    "ServiceLoadedToggleMap",
    "ProviderRegistry",
    "get_default_registry",
    "reset_default_registry",
]
