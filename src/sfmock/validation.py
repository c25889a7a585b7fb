from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional

from .config import MockConfig
from .exceptions import (
    InvalidFieldError,
    RecordNotFoundError,
    RequiredFieldMissingError,
    SchemaMissingError,
)
from .schema import SchemaMap, required_fields
from .store import RecordStore

_logger = logging.getLogger(__name__)


class Validator:
    """Pre-mutation checks, each switched on or off by the configuration.

    ``schema`` is a zero-argument callable so the schema file is only read
    when a check actually needs it.
    """

    def __init__(
        self,
        config: MockConfig,
        schema: Callable[[], SchemaMap],
        store: RecordStore,
    ) -> None:
        self.config = config
        self._schema = schema
        self.store = store

    def validate_schema(self, object_type: str) -> None:
        if not self.config.raise_on_schema_missing:
            return
        if object_type not in self._schema():
            raise SchemaMissingError(object_type)

    def validate_presence(self, object_type: str, record_id: str, url: Optional[str] = None) -> None:
        if not self.store.exists(object_type, record_id):
            raise RecordNotFoundError(record_id, url=url)

    def validate_required(
        self, object_type: str, attrs: Mapping[str, Any], url: Optional[str] = None
    ) -> None:
        if not self.config.schema_file or not self.config.error_on_required:
            return

        present = set(attrs)
        excluded = self.config.required_exclusions
        missing = [
            name
            for name in required_fields(self._schema().get(object_type))
            if name not in present and name not in excluded
        ]
        if missing:
            _logger.debug("%s insert missing required fields: %s", object_type, missing)
            raise RequiredFieldMissingError(missing, url=url)

    def validate_fields_exist(
        self, current: Optional[Dict[str, Any]], attrs: Mapping[str, Any], url: Optional[str] = None
    ) -> None:
        if not self.config.error_on_unknown_fields:
            return
        known = set(current or {})
        unknown = [name for name in attrs if name not in known]
        if unknown:
            raise InvalidFieldError(unknown, url=url)
