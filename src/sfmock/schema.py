"""
Field schema for mocked objects.

The schema file is YAML, one mapping per object type:

    Object__c:
      Name:
        required: false
        type: string
      Program__c:
        required: true
        type: reference

It is written by ``sfmock schema dump`` from a live org's describe calls and
read back by the mock client to enforce required fields.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol

import yaml

from .exceptions import SchemaUnavailableError

_logger = logging.getLogger(__name__)

FieldSpec = Dict[str, Dict[str, Any]]
SchemaMap = Dict[str, FieldSpec]


class Describer(Protocol):
    def describe_object(self, name: str) -> dict: ...


def load_schema(path: str | Path | None) -> SchemaMap:
    """Read a schema file; a missing or unset path is a configuration error."""
    if path is None:
        raise SchemaUnavailableError("Schema file is not defined")
    p = Path(path)
    if not p.is_file():
        raise SchemaUnavailableError("No schema for Salesforce object is available")

    with p.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise SchemaUnavailableError(f"Schema file {p} must contain a mapping of object types")

    _logger.info("Loaded schema for %d object(s) from %s", len(data), p)
    return {str(name): dict(fields or {}) for name, fields in data.items()}


def required_fields(spec: Optional[FieldSpec]) -> List[str]:
    """Names of required fields, in the order the schema declares them."""
    if not spec:
        return []
    return [str(name) for name, meta in spec.items() if (meta or {}).get("required")]


def field_spec_from_describe(describe: dict) -> FieldSpec:
    """Translate a /sobjects/<name>/describe payload into a FieldSpec.

    A field is required when the API would reject an insert without it:
    createable, not nillable and not defaulted on create.
    """
    spec: FieldSpec = {}
    for f in describe.get("fields", []):
        name = f.get("name")
        if not name:
            continue
        required = bool(
            f.get("createable") and not f.get("nillable", True) and not f.get("defaultedOnCreate")
        )
        spec[name] = {
            "required": required,
            "type": f.get("type"),
            "label": f.get("label"),
        }
    return spec


class SchemaManager:
    """Builds schema files from a connected describe client."""

    def __init__(self, api: Optional[Describer] = None) -> None:
        self.api = api

    def get_schema(self, name: str) -> FieldSpec:
        if self.api is None:
            raise SchemaUnavailableError("No Salesforce connection available to describe objects")
        _logger.debug("Describing %s", name)
        return field_spec_from_describe(self.api.describe_object(name))

    def load_schema(self, path: str | Path | None) -> SchemaMap:
        return load_schema(path)

    def dump_schema(self, objects: Iterable[str], path: str | Path) -> SchemaMap:
        """Describe each object and write the combined schema to path."""
        schema: SchemaMap = {name: self.get_schema(name) for name in objects}
        if not schema:
            raise SchemaUnavailableError("No objects given to dump a schema for")

        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        with out.open("w", encoding="utf-8") as f:
            yaml.safe_dump(schema, f, sort_keys=False, default_flow_style=False)

        _logger.info("Wrote schema for %d object(s) to %s", len(schema), out)
        return schema
