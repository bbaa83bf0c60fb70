from __future__ import annotations

from functools import cached_property
from typing import Optional

from ..base import BaseDomainConfig


class ServerConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "server"

    @cached_property
    def environment(self) -> Optional[str]:
        raw = self.section.get("environment")
        if raw is None:
            return None
        value = str(raw).strip()
        return value or None


__all__ = ["ServerConfig"]
