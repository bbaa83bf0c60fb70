"""Where toggle config resources are searched for."""
from __future__ import annotations

import os
from functools import cached_property
from pathlib import Path
from typing import List

from ..base import BaseDomainConfig

DEFAULT_NAMESPACE = "togglestack/toggles"


class ResourcesConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "resources"

    @cached_property
    def namespace(self) -> str:
        raw = str(self.section.get("namespace") or DEFAULT_NAMESPACE).strip()
        return raw.strip("/") or DEFAULT_NAMESPACE

    @cached_property
    def roots(self) -> List[Path]:
        """Extra resource roots, highest priority first.

        Accepts a YAML list or an ``os.pathsep``-separated string (handy for
        ``TOGGLESTACK_resources__roots``).
        """
        raw = self.section.get("roots") or []
        if isinstance(raw, str):
            raw = raw.split(os.pathsep)
        if not isinstance(raw, list):
            return []
        out: List[Path] = []
        for item in raw:
            s = os.path.expandvars(str(item or "")).strip()
            if s:
                out.append(Path(s).expanduser())
        return out

    @cached_property
    def include_sys_path(self) -> bool:
        return bool(self.section.get("include_sys_path", True))


__all__ = ["ResourcesConfig", "DEFAULT_NAMESPACE"]
