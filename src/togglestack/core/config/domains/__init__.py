"""Domain-specific settings accessors."""
from __future__ import annotations

from .flags import FlagsConfig
from .logging import LoggingConfig
from .resources import ResourcesConfig
from .server import ServerConfig

__all__ = ["FlagsConfig", "LoggingConfig", "ResourcesConfig", "ServerConfig"]
