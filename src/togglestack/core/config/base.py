"""Base class for domain-specific settings accessors.

Provides a standardized pattern for all domain configs with:
- Centralized caching via cache.py (through ConfigManager.load_config)
- Type-safe section access
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from functools import cached_property
from typing import Any, Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .manager import ConfigManager


class BaseDomainConfig(ABC):
    """Abstract base class for domain-specific settings accessors.

    Usage:
        class MyConfig(BaseDomainConfig):
            def _config_section(self) -> str:
                return "mySection"

            @cached_property
            def my_setting(self) -> str:
                return self.section.get("mySetting", "default")

        cfg = MyConfig()
        print(cfg.my_setting)
    """

    def __init__(self, manager: Optional["ConfigManager"] = None) -> None:
        if manager is None:
            # Lazy import to avoid circular dependencies
            from .manager import ConfigManager

            manager = ConfigManager()
        self.manager = manager
        self._config = manager.load_config(validate=False)

    @abstractmethod
    def _config_section(self) -> str:
        """Return the top-level settings key for this domain."""
        ...

    @cached_property
    def section(self) -> Dict[str, Any]:
        """This domain's settings section, or an empty dict if it is absent."""
        value = self._config.get(self._config_section(), {}) or {}
        return value if isinstance(value, dict) else {}


__all__ = ["BaseDomainConfig"]
