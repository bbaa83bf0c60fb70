"""Shared CLI utilities."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional

from togglestack.core.config.domains import ResourcesConfig
from togglestack.core.config.manager import ConfigManager
from togglestack.core.resources.locator import ResourceLocator
from togglestack.core.resources.model import ResourceRoot
from togglestack.core.server_info import ServerInfo


def get_config_manager(args: argparse.Namespace) -> ConfigManager:
    raw: Optional[str] = getattr(args, "config_file", None)
    return ConfigManager(Path(raw).expanduser() if raw else None)


def build_locator(args: argparse.Namespace, manager: ConfigManager) -> ResourceLocator:
    """Settings-based locator with ``--root`` roots in front."""
    extra = [ResourceRoot(kind="cli", path=Path(r).expanduser()) for r in getattr(args, "roots", []) or []]
    search_path = [] if getattr(args, "no_sys_path", False) else None
    base = ResourceLocator.from_settings(ResourcesConfig(manager), search_path=search_path)
    return ResourceLocator([*extra, *base.roots], namespace=base.namespace)


def build_server_info(args: argparse.Namespace, manager: ConfigManager) -> ServerInfo:
    environment = getattr(args, "environment", None)
    if environment:
        return ServerInfo(environment=environment)
    return ServerInfo.from_settings(manager)
