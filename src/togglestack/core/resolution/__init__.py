from __future__ import annotations

from .resolver import ConfigResolver, service_config_name

__all__ = ["ConfigResolver", "service_config_name"]
