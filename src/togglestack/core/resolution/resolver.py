"""Selecting the JSON toggle config for a library.

For a base config name ``C`` (``L`` for the library owner, ``L-service``
for the service owner) and an optional environment ``E``:

1. ``C-e.json`` (``e`` = lower-cased ``E``) wins whenever it exists, even if
   it defines no toggles; presence is a deliberate configuration act.
2. Otherwise ``C.json`` is used.
3. Otherwise the result is ``NULL_TOGGLE_MAP``.

The environment file replaces the base file entirely; the two are never
merged toggle by toggle.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from togglestack.core.exceptions import AmbiguousConfigError, ConfigParseError
from togglestack.core.resources.locator import ResourceLocator
from togglestack.core.toggle.ids import is_valid_id
from togglestack.core.toggle.json_map import JsonToggleMap
from togglestack.core.toggle.maps import NULL_TOGGLE_MAP, ToggleMap, is_null

logger = logging.getLogger(__name__)

Parser = Callable[[Path], ToggleMap]


def service_config_name(library_name: str) -> str:
    return f"{library_name}-service"


def environment_config_name(config_name: str, environment: Optional[str]) -> Optional[str]:
    if environment is None:
        return None
    return f"{config_name}-{str(environment).lower()}"


class ConfigResolver:
    """Resolves config names to toggle maps through a :class:`ResourceLocator`."""

    def __init__(self, locator: ResourceLocator, parser: Optional[Parser] = None) -> None:
        self.locator = locator
        self.parser: Parser = parser or JsonToggleMap.parse

    def load_single(self, config_name: str) -> ToggleMap:
        """Load the one resource for ``config_name``.

        Returns ``NULL_TOGGLE_MAP`` when nothing matches.

        Raises:
            AmbiguousConfigError: More than one resource matched.
            ConfigParseError: The single match could not be parsed (the
                parser's exception is chained as ``__cause__``).
        """
        resources = self.locator.locate(config_name)
        if len(resources) > 1:
            raise AmbiguousConfigError(config_name, resources)
        if not resources:
            logger.debug("No toggle config resource found for %s", config_name)
            return NULL_TOGGLE_MAP

        resource = resources[0]
        logger.debug("Toggle config resource found for %s, using %s", config_name, resource)
        try:
            return self.parser(resource)
        except Exception as exc:
            raise ConfigParseError(config_name, resource) from exc

    def resolve(self, library_name: str, config_name: str, environment: Optional[str] = None) -> ToggleMap:
        """Return the environment-specific config if present, else the base one.

        ``library_name`` is carried for diagnostics only; ``config_name``
        decides which resources are read.
        """
        without_env = self.load_single(config_name)
        env_name = environment_config_name(config_name, environment)
        if env_name is not None and not is_valid_id(env_name):
            # Labels that cannot form a resource name never match a resource.
            logger.debug("%s: no config resource can match environment %r", library_name, environment)
            env_name = None
        with_env = self.load_single(env_name) if env_name is not None else NULL_TOGGLE_MAP

        if not is_null(with_env):
            logger.debug("%s: using environment config %s", library_name, env_name)
            return with_env
        return without_env


__all__ = ["ConfigResolver", "service_config_name", "environment_config_name"]
