"""Information about the running server relevant to toggle resolution."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from togglestack.core.config.manager import ConfigManager


@dataclass(frozen=True)
class ServerInfo:
    """Deployment details supplied by the host process.

    ``environment`` is an opaque label such as ``"staging"``; it selects
    environment-specific config variants.
    """

    environment: Optional[str] = None

    @classmethod
    def from_settings(cls, manager: Optional["ConfigManager"] = None) -> "ServerInfo":
        """Read ``server.environment`` (``TOGGLESTACK_server__environment``)."""
        # Lazy import to avoid circular dependencies
        from togglestack.core.config.domains import ServerConfig

        return cls(environment=ServerConfig(manager).environment)

    def current_environment(self) -> Optional[str]:
        return self.environment


__all__ = ["ServerInfo"]
