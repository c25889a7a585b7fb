"""
SOQL matching for the mock client.

Only one query shape is understood, and it is read by token position rather
than parsed:

    SELECT <fields> FROM <Type> WHERE <Field> = '<Value>'

Token 3 is the object type, token 5 the field name and the last token the
value. The value loses one surrounding pair of single quotes and every
backslash, so an escaped apostrophe (``O\\'Brian``) compares equal to the
stored ``O'Brian``. A quoted value containing spaces is not supported: only
its last word is compared. AND/OR, other operators, LIMIT and friends are
not recognised and give undefined results.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from .exceptions import MalformedQueryError
from .store import RecordStore

_logger = logging.getLogger(__name__)

_QUOTES = re.compile(r"^'|'$")

_TYPE_POS = 3
_FIELD_POS = 5
_MIN_TOKENS = 6


@dataclass(frozen=True)
class EqualityQuery:
    object_type: str
    field: str
    value: str


def _unquote(token: str) -> str:
    return _QUOTES.sub("", token).replace("\\", "")


def parse_query(soql: str) -> EqualityQuery:
    tokens = soql.split()
    if len(tokens) < _MIN_TOKENS:
        raise MalformedQueryError(
            f"Unsupported query (expected SELECT ... FROM <Type> WHERE <Field> = '<Value>'): {soql!r}"
        )
    return EqualityQuery(
        object_type=tokens[_TYPE_POS],
        field=tokens[_FIELD_POS],
        value=_unquote(tokens[-1]),
    )


def find_record_id(store: RecordStore, soql: str) -> Optional[str]:
    """Return the id of the first stored record matching soql, or None."""
    q = parse_query(soql)
    record_id = store.find_first(q.object_type, q.field, q.value)
    _logger.debug("Query %s.%s = %r -> %s", q.object_type, q.field, q.value, record_id)
    return record_id
