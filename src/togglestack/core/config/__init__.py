"""togglestack settings.

Usage:
    from togglestack.core.config import ConfigManager
    from togglestack.core.config.domains import ResourcesConfig

    manager = ConfigManager()
    settings = manager.load_config()

    resources = ResourcesConfig(manager)
    resources.namespace
"""
from __future__ import annotations

from .base import BaseDomainConfig
from .cache import clear_all_caches, get_cached_config, is_cached, register_cache_clearer
from .manager import ConfigManager

from .domains import (
    FlagsConfig,
    LoggingConfig,
    ResourcesConfig,
    ServerConfig,
)

__all__ = [
    # Core
    "ConfigManager",
    "BaseDomainConfig",
    # Caching
    "get_cached_config",
    "clear_all_caches",
    "register_cache_clearer",
    "is_cached",
    # Domain configs
    "ResourcesConfig",
    "ServerConfig",
    "FlagsConfig",
    "LoggingConfig",
]
