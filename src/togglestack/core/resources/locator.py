"""Toggle config resource lookup.

A config named ``<configName>`` lives at::

    <root>/<namespace>/configs/<configName>.json

for every resource root, the way Java resources live on a classpath. Roots
are searched in order (settings roots, then ``sys.path`` directories) and
*every* match is returned: callers need the full set to detect ambiguous
configuration, so the search never stops at the first hit.
"""
from __future__ import annotations

import logging
import os
import stat
import sys
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Optional, Sequence, Tuple, Union, TYPE_CHECKING

from togglestack.core.config.domains.resources import DEFAULT_NAMESPACE
from togglestack.core.exceptions import InvalidNameError, ResourceLookupError
from togglestack.core.toggle.ids import is_valid_id

from .model import ResourceRoot

if TYPE_CHECKING:
    from togglestack.core.config.domains import ResourcesConfig

logger = logging.getLogger(__name__)

RootLike = Union[ResourceRoot, Path, str]


def config_resource_path(config_name: str, namespace: str = DEFAULT_NAMESPACE) -> PurePosixPath:
    """Return the relative resource path for ``config_name``.

    Raises:
        InvalidNameError: If ``config_name`` could escape the configs
            directory (anything outside ``[A-Za-z0-9_.-]``).
    """
    if not is_valid_id(config_name):
        raise InvalidNameError(str(config_name), kind="config name")
    return PurePosixPath(namespace.strip("/")) / "configs" / f"{config_name}.json"


def _as_root(root: RootLike) -> ResourceRoot:
    if isinstance(root, ResourceRoot):
        return root
    return ResourceRoot(kind="explicit", path=Path(root))


def _dedupe(roots: Iterable[ResourceRoot]) -> Tuple[ResourceRoot, ...]:
    seen = set()
    out: List[ResourceRoot] = []
    for root in roots:
        key = os.path.realpath(root.path)
        if key in seen:
            continue
        seen.add(key)
        out.append(root)
    return tuple(out)


class ResourceLocator:
    """Finds toggle config resources under a fixed path template."""

    def __init__(self, roots: Iterable[RootLike], *, namespace: str = DEFAULT_NAMESPACE) -> None:
        self.namespace = namespace.strip("/") or DEFAULT_NAMESPACE
        self.roots: Tuple[ResourceRoot, ...] = _dedupe(_as_root(r) for r in roots)

    @classmethod
    def from_settings(
        cls,
        config: Optional["ResourcesConfig"] = None,
        *,
        search_path: Optional[Sequence[str]] = None,
    ) -> "ResourceLocator":
        """Build a locator from the ``resources`` settings section.

        Args:
            config: Resources settings (loaded from defaults/env when None).
            search_path: Directories appended after the configured roots when
                ``include_sys_path`` is enabled (defaults to ``sys.path``).
        """
        if config is None:
            # Lazy import to avoid circular dependencies
            from togglestack.core.config.domains import ResourcesConfig

            config = ResourcesConfig()

        roots: List[ResourceRoot] = [ResourceRoot(kind="settings", path=p) for p in config.roots]
        if config.include_sys_path:
            entries = sys.path if search_path is None else search_path
            for entry in entries:
                roots.append(ResourceRoot(kind="sys.path", path=Path(entry or os.curdir)))
        return cls(roots, namespace=config.namespace)

    def resource_path(self, config_name: str) -> PurePosixPath:
        return config_resource_path(config_name, self.namespace)

    def locate(self, config_name: str) -> List[Path]:
        """Return every resource matching ``config_name``, in root order.

        Missing roots and roots that are not directories are skipped.

        Raises:
            InvalidNameError: If ``config_name`` is not a safe file stem.
            ResourceLookupError: If a root cannot be examined (e.g.
                permission denied).
        """
        relative = self.resource_path(config_name)
        matches: List[Path] = []
        for root in self.roots:
            candidate = root.path.joinpath(*relative.parts)
            try:
                st = candidate.stat()
            except (FileNotFoundError, NotADirectoryError):
                continue
            except OSError as exc:
                raise ResourceLookupError(
                    f"Failed to examine resource root {root.path} for {config_name}: {exc}",
                    context={"config_name": config_name, "root": str(root.path), "kind": root.kind},
                ) from exc
            if stat.S_ISREG(st.st_mode):
                matches.append(candidate)
        logger.debug("Located %d resource(s) for %s: %s", len(matches), relative, matches)
        return matches

    def __repr__(self) -> str:
        return f"ResourceLocator(namespace={self.namespace!r}, roots={len(self.roots)})"


__all__ = ["ResourceLocator", "DEFAULT_NAMESPACE", "config_resource_path"]
