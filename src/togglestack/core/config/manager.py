"""
togglestack settings management (YAML layers + environment overrides).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

import yaml

from togglestack.core.config.cache import get_cached_config
from togglestack.core.schemas.validation import validate_payload
from togglestack.core.utils.merge import deep_merge
from togglestack.data import get_data_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "TOGGLESTACK_"
CONFIG_FILE_ENV_VAR = "TOGGLESTACK_CONFIG_FILE"
DEFAULT_CONFIG_FILENAME = "togglestack.yaml"
SETTINGS_SCHEMA = "config/settings.schema.yaml"

# Opaque labels: environment values for these keys are never type-coerced.
RAW_STRING_KEYS = frozenset({("server", "environment")})


class ConfigManager:
    """Load, merge, and validate togglestack settings.

    Settings sources (highest to lowest priority):
    1. Environment variables: TOGGLESTACK_<section>__<key>
    2. Settings file: $TOGGLESTACK_CONFIG_FILE, else ./togglestack.yaml if present
    3. Bundled defaults: togglestack.data/config/defaults.yaml

    Environment keys must contain ``__`` between path segments so that keys
    with underscores (``include_sys_path``) stay addressable; other
    ``TOGGLESTACK_*`` variables are left alone.
    """

    def __init__(
        self,
        config_file: Optional[Path] = None,
        *,
        cwd: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._explicit_file = Path(config_file) if config_file is not None else None
        self.cwd = Path(cwd) if cwd is not None else Path.cwd()
        self.environ: Mapping[str, str] = os.environ if environ is None else environ
        self.defaults_path = get_data_path("config", "defaults.yaml")

    @property
    def settings_file(self) -> Optional[Path]:
        """The settings file in effect, or None when only defaults apply."""
        if self._explicit_file is not None:
            return self._explicit_file
        from_env = self.environ.get(CONFIG_FILE_ENV_VAR, "").strip()
        if from_env:
            return Path(from_env).expanduser()
        candidate = self.cwd / DEFAULT_CONFIG_FILENAME
        return candidate if candidate.exists() else None

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        # Fail closed: settings must never silently ignore invalid YAML.
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Settings file must contain a YAML mapping: {path}")
        return data

    # ========== Environment Overrides ==========

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except ValueError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(self.environ.keys()):
            if not key.startswith(ENV_PREFIX):
                continue
            raw = key[len(ENV_PREFIX):]
            if "__" not in raw:
                continue
            segs = raw.split("__")
            if any(seg == "" for seg in segs):
                raise ValueError(f"Malformed {ENV_PREFIX}* key: empty segment in '{key}'.")
            path = [seg.lower() for seg in segs]
            value = self.environ[key]
            if tuple(path) in RAW_STRING_KEYS:
                yield path, value.strip()
            else:
                yield path, self._coerce_type(value)

    def _set_nested(self, root: Dict[str, Any], path: List[str], value: Any) -> None:
        cur = root
        for part in path[:-1]:
            nxt = cur.get(part)
            if not isinstance(nxt, dict):
                nxt = {}
                cur[part] = nxt
            cur = nxt
        cur[path[-1]] = value

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> Dict[str, Any]:
        for path, typed_value in self._iter_env_overrides():
            logger.debug("Settings override from environment: %s", ".".join(path))
            self._set_nested(cfg, path, typed_value)
        return cfg

    # ========== Loading ==========

    def _load_config_uncached(self) -> Dict[str, Any]:
        cfg = self.load_yaml(self.defaults_path)
        settings_file = self.settings_file
        if settings_file is not None:
            if not settings_file.exists():
                raise FileNotFoundError(f"Settings file not found: {settings_file}")
            logger.debug("Loading settings from %s", settings_file)
            cfg = deep_merge(cfg, self.load_yaml(settings_file))
        return self.apply_env_overrides(cfg)

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Load settings, cached per settings-file/environment fingerprint.

        Returned dict should be treated as immutable.
        """
        if self.environ is os.environ:
            cfg = get_cached_config(self)
        else:
            cfg = self._load_config_uncached()
        if validate:
            validate_payload(cfg, SETTINGS_SCHEMA)
        return cfg

    # ========== Accessor Methods ==========

    def get_all(self) -> Dict[str, Any]:
        return self.load_config(validate=False)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a settings value by dot-notation key.

        Example:
            >>> manager.get('resources.namespace')
            'togglestack/toggles'
            >>> manager.get('nonexistent.key', 'fallback')
            'fallback'
        """
        current: Any = self.load_config(validate=False)
        for part in key.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current


__all__ = ["ConfigManager", "ENV_PREFIX", "CONFIG_FILE_ENV_VAR", "DEFAULT_CONFIG_FILENAME"]
