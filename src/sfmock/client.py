"""
Drop-in stand-in for a Salesforce REST client that never leaves the process.

The low-level verbs (``api_get``, ``api_patch``, ``api_post``, ``api_delete``)
take the same relative paths the live client builds; the high-level helpers
(``query``, ``find``, ``create``, ``update``, ``destroy``) are layered on
them the same way.
"""

from __future__ import annotations

import logging
import re
import secrets
from typing import Any, Dict, Mapping, Optional, Tuple

from . import response
from .config import MockConfig, configuration
from .exceptions import MalformedPathError, SchemaMissingError
from .query import find_record_id, parse_query
from .response import Response
from .schema import SchemaMap, load_schema, required_fields
from .store import RecordStore, default_store
from .validation import Validator

_logger = logging.getLogger(__name__)

_SOBJECT_PATH = re.compile(r"sobjects/([^/]+)(?:/([^/]+))?/?$")

# secrets.token_urlsafe(13) -> 18 URL-safe characters; collisions are tolerated
_ID_BYTES = 13


def parse_path(path: str) -> Tuple[str, Optional[str]]:
    """Split ``.../sobjects/<Type>[/<Id>]`` into (Type, Id)."""
    m = _SOBJECT_PATH.search(path)
    if not m:
        raise MalformedPathError(f"Expected a path like sobjects/<Type>/<Id>, got {path!r}")
    return m.group(1), m.group(2)


def new_record_id() -> str:
    return secrets.token_urlsafe(_ID_BYTES)


class Client:
    """In-memory Salesforce client.

    Clients created without a store share the process-wide default one, so a
    record inserted through one client is visible to every other. Without a
    config, the process-wide configuration is read on every call.
    """

    def __init__(
        self,
        config: Optional[MockConfig] = None,
        store: Optional[RecordStore] = None,
        **opts: Any,
    ) -> None:
        # Auth options (username, client_id, ...) are accepted and ignored.
        self.opts = opts
        self._config = config
        self.store = store if store is not None else default_store()
        self._schema_cache: Optional[Tuple[str, SchemaMap]] = None

    @property
    def config(self) -> MockConfig:
        return self._config if self._config is not None else configuration()

    @property
    def validator(self) -> Validator:
        return Validator(self.config, self.schema, self.store)

    def schema(self) -> SchemaMap:
        """Schema from the configured file, loaded once per file path."""
        path = self.config.schema_file
        if self._schema_cache is None or self._schema_cache[0] != path:
            self._schema_cache = (path, load_schema(path))
        return self._schema_cache[1]

    # --------------------------- REST verbs ---------------------------

    def api_get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Response:
        if path == "query" and params:
            soql = next(iter(params.values()))
            object_type = parse_query(soql).object_type
            record_id = find_record_id(self.store, soql)
            return Response(response.collection(object_type, [record_id], self.config.api_version))

        object_type, record_id = parse_path(path)
        record = self.store.get(object_type, record_id) if record_id else None
        return Response(response.single(record))

    def api_patch(self, path: str, attrs: Mapping[str, Any]) -> Response:
        object_type, record_id = parse_path(path)
        if record_id is None:
            raise MalformedPathError(f"PATCH needs a record id: {path!r}")

        v = self.validator
        v.validate_schema(object_type)
        v.validate_presence(object_type, record_id, url=path)
        v.validate_fields_exist(self.store.get(object_type, record_id), attrs, url=path)

        merged = self.store.update(object_type, record_id, dict(attrs))
        return Response(response.single(dict(merged)))

    def api_post(self, path: str, attrs: Mapping[str, Any]) -> Response:
        object_type, _ = parse_path(path)
        record_id = new_record_id()

        v = self.validator
        v.validate_schema(object_type)
        v.validate_required(object_type, attrs, url=path)

        self.store.insert(object_type, record_id, dict(attrs))
        _logger.debug("Created %s %s", object_type, record_id)
        return Response(response.single(record_id), status_code=201)

    def api_delete(self, path: str) -> Response:
        object_type, record_id = parse_path(path)
        if record_id is None:
            raise MalformedPathError(f"DELETE needs a record id: {path!r}")

        self.validator.validate_presence(object_type, record_id, url=path)
        self.store.delete(object_type, record_id)
        return Response(None, status_code=204)

    # --------------------------- High-level helpers -------------------

    def query(self, soql: str) -> Dict[str, Any]:
        return self.api_get("query", {"q": soql}).body

    def find(self, sobject: str, record_id: str) -> Optional[Dict[str, Any]]:
        return self.api_get(f"sobjects/{sobject}/{record_id}").body["id"]

    def create(self, sobject: str, attrs: Mapping[str, Any]) -> str:
        return self.api_post(f"sobjects/{sobject}", attrs).body["id"]

    def update(self, sobject: str, attrs: Mapping[str, Any]) -> bool:
        """Update the record named by attrs["Id"] with the remaining fields."""
        fields = dict(attrs)
        upper, lower = fields.pop("Id", None), fields.pop("id", None)
        record_id = upper or lower
        if not record_id:
            raise ValueError("update() requires an Id in attrs")
        self.api_patch(f"sobjects/{sobject}/{record_id}", fields)
        return True

    def destroy(self, sobject: str, record_id: str) -> bool:
        self.api_delete(f"sobjects/{sobject}/{record_id}")
        return True

    def describe_object(self, name: str) -> dict:
        """Describe payload synthesised from the schema file."""
        spec = self.schema().get(name)
        if spec is None:
            raise SchemaMissingError(name)
        required = set(required_fields(spec))
        return {
            "name": name,
            "fields": [
                {
                    "name": field,
                    "type": (meta or {}).get("type"),
                    "label": (meta or {}).get("label") or field,
                    "createable": True,
                    "nillable": field not in required,
                    "defaultedOnCreate": False,
                }
                for field, meta in spec.items()
            ],
        }

    # --------------------------- Test seeding -------------------------

    def add_object(self, name: str, record_id: str, values: Dict[str, Any]) -> None:
        self.store.insert(name, record_id, values)

    def get_object(self, name: str, record_id: str) -> Optional[Dict[str, Any]]:
        return self.store.get(name, record_id)

    def update_object(self, name: str, record_id: str, attrs: Dict[str, Any]) -> Dict[str, Any]:
        return self.store.update(name, record_id, attrs)
