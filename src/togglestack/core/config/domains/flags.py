from __future__ import annotations

from functools import cached_property
from typing import Dict

from ..base import BaseDomainConfig


class FlagsConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "flags"

    @cached_property
    def overrides(self) -> Dict[str, float]:
        """Toggle id -> fraction overrides from settings (unvalidated)."""
        raw = self.section.get("overrides") or {}
        if not isinstance(raw, dict):
            return {}
        return {str(k): v for k, v in raw.items()}


__all__ = ["FlagsConfig"]
