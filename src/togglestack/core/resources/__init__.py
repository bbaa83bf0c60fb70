"""Locating toggle config resources across resource roots."""
from __future__ import annotations

from .locator import ResourceLocator, config_resource_path
from .model import ResourceRoot

__all__ = ["ResourceLocator", "ResourceRoot", "config_resource_path"]
