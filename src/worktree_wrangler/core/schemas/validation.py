"""Shared schema validation utilities.

Configuration payloads (the user config file and per-repository configs)
are validated with JSON Schema. Schemas are stored as YAML files under
``worktree_wrangler.data/schemas/``.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, List

from jsonschema import Draft202012Validator

from worktree_wrangler.core.exceptions import ErrorKind, WranglerError
from worktree_wrangler.data import get_data_path
from worktree_wrangler.core.utils.io import read_yaml


@lru_cache(maxsize=8)
def load_schema(schema_name: str) -> Dict[str, Any]:
    """Load a bundled schema dict. ``.schema.yaml`` is appended when missing.

    Raises:
        FileNotFoundError: If schema file doesn't exist.
        ValueError: If schema is not a YAML mapping.
    """
    if not schema_name.endswith((".yaml", ".yml")):
        schema_name = f"{schema_name}.schema.yaml"

    schema_path = get_data_path("schemas", schema_name)
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_name}")

    schema = read_yaml(schema_path, default=None, raise_on_error=True)
    if not isinstance(schema, dict):
        raise ValueError(f"Schema must be a YAML mapping, got {type(schema).__name__}")
    return schema


def validate_payload_safe(payload: Any, schema_name: str) -> List[str]:
    """Validate a payload and return list of error messages (empty if valid)."""
    validator = Draft202012Validator(load_schema(schema_name))
    errors: List[str] = []
    for error in sorted(validator.iter_errors(payload), key=lambda e: [str(p) for p in e.path]):
        if error.path:
            path_str = ".".join(str(p) for p in error.path)
            errors.append(f"{path_str}: {error.message}")
        else:
            errors.append(error.message)
    return errors


def validate_payload(payload: Any, schema_name: str, *, source: str | None = None) -> None:
    """Validate a payload against a bundled schema.

    Raises:
        WranglerError: ``INVALID_CONFIG`` listing every violation.
    """
    errors = validate_payload_safe(payload, schema_name)
    if errors:
        where = f" in {source}" if source else ""
        raise WranglerError(
            ErrorKind.INVALID_CONFIG,
            f"Invalid configuration{where}: " + "; ".join(errors),
            context={"schema": schema_name, "source": source, "errors": "; ".join(errors)},
        )


__all__ = ["load_schema", "validate_payload", "validate_payload_safe"]
