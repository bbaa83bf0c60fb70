"""JSON-backed toggle maps.

Config resources use this format::

    {
      "toggles": [
        {
          "id": "com.example.lib.NewThing",
          "description": "Enables the new thing",
          "fraction": 0.25,
          "comment": "optional, ignored"
        }
      ]
    }

Payloads are validated against ``toggles/toggle-config.schema.yaml`` before
any toggle is built; ids must be unique within one resource.
"""
from __future__ import annotations

import json
from collections import Counter
from enum import Enum
from pathlib import Path
from typing import Any, List

from togglestack.core.schemas.validation import validate_payload

from .ids import validate_fraction, validate_id
from .maps import ImmutableToggleMap
from .models import ToggleMetadata

TOGGLE_CONFIG_SCHEMA = "toggles/toggle-config"


class DescriptionMode(Enum):
    """Whether each toggle entry must carry a description."""

    REQUIRED = "required"
    IGNORED = "ignored"


class JsonToggleMap:
    """Parses JSON toggle configs into :class:`ImmutableToggleMap` instances."""

    @staticmethod
    def parse(
        path: Path | str,
        description_mode: DescriptionMode = DescriptionMode.IGNORED,
    ) -> ImmutableToggleMap:
        """Parse the resource at ``path``.

        Raises:
            OSError: If the resource cannot be read.
            ValueError: If the payload is not valid JSON or is not a valid
                toggle config (``SchemaValidationError`` is a ValueError).
        """
        resource = Path(path)
        text = resource.read_text(encoding="utf-8")
        return JsonToggleMap.parse_string(text, source=str(resource), description_mode=description_mode)

    @staticmethod
    def parse_string(
        text: str,
        *,
        source: str = "",
        description_mode: DescriptionMode = DescriptionMode.IGNORED,
    ) -> ImmutableToggleMap:
        payload = json.loads(text)
        return JsonToggleMap.from_payload(payload, source=source, description_mode=description_mode)

    @staticmethod
    def from_payload(
        payload: Any,
        *,
        source: str = "",
        description_mode: DescriptionMode = DescriptionMode.IGNORED,
    ) -> ImmutableToggleMap:
        validate_payload(payload, TOGGLE_CONFIG_SCHEMA)
        entries = payload["toggles"]

        dupes = sorted(i for i, n in Counter(e["id"] for e in entries).items() if n > 1)
        if dupes:
            raise ValueError(f"Duplicate toggle ids found in {source or 'config'}: {', '.join(dupes)}")

        metadata: List[ToggleMetadata] = []
        for entry in entries:
            toggle_id = validate_id(entry["id"])
            fraction = validate_fraction(toggle_id, entry["fraction"])
            description = entry.get("description")
            if description_mode is DescriptionMode.REQUIRED:
                if not isinstance(description, str) or not description.strip():
                    raise ValueError(f"Toggle {toggle_id!r} in {source or 'config'} requires a description")
            else:
                description = None
            metadata.append(ToggleMetadata(toggle_id, fraction, description, source))

        return ImmutableToggleMap(metadata, source=source)


__all__ = ["JsonToggleMap", "DescriptionMode", "TOGGLE_CONFIG_SCHEMA"]
