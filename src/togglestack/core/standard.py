"""The standard toggle map for a library.

``standard_toggle_map`` composes, highest precedence first:

1. a mutable, in-process map (``MutableToggleMap``)
2. the process-wide flag overrides (``FlagToggleMap``)
3. the service owner's JSON config: ``<L>-service[-<env>].json``
4. the dynamically loaded provider for the library, if any
5. the library owner's JSON config: ``<L>[-<env>].json``

Layers 1-3 let operators and service owners test and override toggles;
layers 4-5 belong to the library authors. JSON configs live at
``<root>/<namespace>/configs/<configName>.json`` in any resource root (see
``togglestack.core.resources``). A library named
``com.example.lib`` ships ``com.example.lib.json`` and services customise it
with ``com.example.lib-service.json``.
"""
from __future__ import annotations

import logging
from typing import Optional, Tuple

from togglestack.core.config.domains import FlagsConfig, ResourcesConfig
from togglestack.core.config.manager import ConfigManager
from togglestack.core.providers.registry import ProviderRegistry, get_default_registry
from togglestack.core.resolution.resolver import ConfigResolver, service_config_name
from togglestack.core.resources.locator import ResourceLocator
from togglestack.core.server_info import ServerInfo
from togglestack.core.stats import StatsReceiver
from togglestack.core.toggle.flags import FlagOverrides, FlagToggleMap, get_process_flags
from togglestack.core.toggle.ids import validate_library_name
from togglestack.core.toggle.maps import MutableToggleMap, ToggleMap, stack
from togglestack.core.toggle.observed import ObservedToggleMap

logger = logging.getLogger(__name__)

STATS_SCOPE = "toggles"
_LAYER_NAMES: Tuple[str, ...] = ("mutable", "flags", "service", "dynamic", "library")


def standard_toggle_map(
    library_name: str,
    stats_receiver: StatsReceiver,
    *,
    mutable: Optional[ToggleMap] = None,
    server_info: Optional[ServerInfo] = None,
    flags: Optional[ToggleMap] = None,
    providers: Optional[ProviderRegistry] = None,
    locator: Optional[ResourceLocator] = None,
    manager: Optional[ConfigManager] = None,
) -> ObservedToggleMap:
    """Assemble the observed toggle chain for ``library_name``.

    Args:
        library_name: Fully qualified library name, e.g. ``com.example.lib``.
            Valid characters are ``A-Z a-z 0-9 _ - .``.
        stats_receiver: Unscoped receiver; outcomes are recorded under
            ``toggles/<library_name>``.
        mutable: In-process overrides (a fresh ``MutableToggleMap`` if None).
        server_info: Source of the environment (settings if None).
        flags: Process-wide overrides (the per-process ``FlagToggleMap`` if None).
        providers: Dynamic provider registry (the per-process registry if None).
        locator: Resource locator (built from settings if None).
        manager: Settings to use instead of the default ``ConfigManager``.

    Raises:
        InvalidNameError: ``library_name`` has disallowed characters.
        AmbiguousConfigError: Several resources match one config name.
        ConfigParseError: A config resource could not be parsed.
        AmbiguousProviderError: Several providers claim ``library_name``.
    """
    validate_library_name(library_name)

    if server_info is None:
        server_info = ServerInfo.from_settings(manager)
    if locator is None:
        locator = ResourceLocator.from_settings(ResourcesConfig(manager))
    if mutable is None:
        mutable = MutableToggleMap()
    if flags is None:
        if manager is None:
            flags = get_process_flags()
        else:
            flags = FlagToggleMap(FlagOverrides.from_settings(FlagsConfig(manager).overrides, manager.environ))
    if providers is None:
        providers = get_default_registry()

    environment = server_info.current_environment()
    resolver = ConfigResolver(locator)
    service_config = resolver.resolve(library_name, service_config_name(library_name), environment)
    library_config = resolver.resolve(library_name, library_name, environment)
    dynamic = providers.lookup(library_name)

    layers = (mutable, flags, service_config, dynamic, library_config)
    chain = stack(*layers)
    logger.info(
        "Assembled toggle map for %s (environment=%s): %s",
        library_name,
        environment,
        ", ".join(f"{name}={layer!r}" for name, layer in zip(_LAYER_NAMES, layers)),
    )
    return ObservedToggleMap(chain, stats_receiver.scope(STATS_SCOPE, library_name))


__all__ = ["standard_toggle_map", "STATS_SCOPE"]
