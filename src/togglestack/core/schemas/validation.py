"""Shared schema validation utilities.

togglestack validates structured payloads (JSON toggle configs, merged
settings) using JSON Schema. Schemas are stored as YAML files under
``togglestack.data/schemas/`` and loaded in a single, consistent way.
"""
from __future__ import annotations

from typing import Any, Dict, List

import jsonschema
from jsonschema import Draft202012Validator

from togglestack.core.exceptions import SchemaValidationError
from togglestack.data import get_data_path, read_yaml


def load_schema(schema_name: str) -> Dict[str, Any]:
    """Load a bundled schema dict.

    Automatically appends ``.schema.yaml`` if no extension is present.

    Args:
        schema_name: Relative schema path under the schemas root
            (e.g., "toggles/toggle-config" or "config/settings.schema.yaml").

    Raises:
        FileNotFoundError: If schema file doesn't exist.
        ValueError: If schema is not a YAML mapping.
    """
    lowered = schema_name.lower()
    if not (lowered.endswith(".yaml") or lowered.endswith(".yml")):
        schema_name = f"{schema_name}.schema.yaml"

    path = get_data_path("schemas", schema_name)
    if not path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_name} (searched {path.parent})")

    schema = read_yaml("schemas", schema_name)
    if not isinstance(schema, dict):
        raise ValueError(f"Schema must be a YAML mapping, got {type(schema).__name__}")
    return schema


def _format_error(error: jsonschema.ValidationError) -> str:
    if error.path:
        path_str = ".".join(str(p) for p in error.path)
        return f"{path_str}: {error.message}"
    return error.message


def validate_payload(payload: Any, schema_name: str) -> None:
    """Validate a payload against a bundled JSON schema.

    Raises:
        SchemaValidationError: If validation fails. All violations are listed
            in ``context["errors"]``.
        FileNotFoundError: If schema doesn't exist.
    """
    errors = validate_payload_safe(payload, schema_name)
    if errors:
        raise SchemaValidationError(
            f"Validation failed against schema '{schema_name}': {'; '.join(errors)}",
            context={"schema": schema_name, "errors": errors},
        )


def validate_payload_safe(payload: Any, schema_name: str) -> List[str]:
    """Validate a payload and return list of error messages (empty if valid).

    Schema loading problems still raise; only payload violations are
    collected.
    """
    schema = load_schema(schema_name)
    validator = Draft202012Validator(schema)
    return [
        _format_error(error)
        for error in sorted(validator.iter_errors(payload), key=lambda e: [str(p) for p in e.path])
    ]


__all__ = [
    "load_schema",
    "validate_payload",
    "validate_payload_safe",
    "SchemaValidationError",
]
