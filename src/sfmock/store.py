"""
In-memory record storage shared by mock clients.

Records are kept per object type (``"Contact"``, ``"Object__c"``) and keyed
by record id. Every operation takes the store lock, but check-then-act
sequences spanning several calls (validate, then insert) are not atomic:
tests that share a store across threads must serialise their own calls.
Nothing is persisted; call ``reset()`` between tests.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Iterator, List, Optional

from .exceptions import ConflictError, StoreDisposedError

_logger = logging.getLogger(__name__)

Record = Dict[str, Any]
Bucket = Dict[str, Record]


class RecordStore:
    """Object type -> record id -> record mapping with an explicit lifecycle."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._buckets: Dict[str, Bucket] = {}
        self._disposed = False

    # --------------------------- Lifecycle ----------------------------

    def reset(self) -> None:
        """Drop every record of every object type."""
        with self._lock:
            self._check_open()
            self._buckets = {}
        _logger.debug("Record store reset")

    def dispose(self) -> None:
        """Reset the store and refuse any further use."""
        with self._lock:
            self._buckets = {}
            self._disposed = True

    @property
    def disposed(self) -> bool:
        return self._disposed

    def _check_open(self) -> None:
        if self._disposed:
            raise StoreDisposedError("Record store has been disposed")

    # --------------------------- Buckets ------------------------------

    def bucket(self, object_type: str) -> Bucket:
        """Return the bucket for object_type, creating an empty one if unseen."""
        with self._lock:
            self._check_open()
            return self._buckets.setdefault(object_type, {})

    def object_types(self) -> List[str]:
        with self._lock:
            return list(self._buckets)

    def __len__(self) -> int:
        with self._lock:
            return sum(len(b) for b in self._buckets.values())

    def __iter__(self) -> Iterator[str]:
        return iter(self.object_types())

    # --------------------------- Records ------------------------------

    def insert(self, object_type: str, record_id: str, record: Record) -> None:
        """Add a record; an id already holding a non-empty record is a conflict."""
        with self._lock:
            bucket = self.bucket(object_type)
            if bucket.get(record_id):
                raise ConflictError(object_type, record_id)
            bucket[record_id] = record
        _logger.debug("Inserted %s/%s", object_type, record_id)

    def get(self, object_type: str, record_id: str) -> Optional[Record]:
        with self._lock:
            return self.bucket(object_type).get(record_id)

    def exists(self, object_type: str, record_id: str) -> bool:
        with self._lock:
            return record_id in self.bucket(object_type)

    def update(self, object_type: str, record_id: str, attrs: Record) -> Record:
        """Shallow-merge attrs over the stored record and return the result.

        Existence is not checked here; validate before calling.
        """
        with self._lock:
            bucket = self.bucket(object_type)
            merged = {**(bucket.get(record_id) or {}), **attrs}
            bucket[record_id] = merged
        _logger.debug("Updated %s/%s fields=%s", object_type, record_id, list(attrs))
        return merged

    def delete(self, object_type: str, record_id: str) -> Optional[Record]:
        with self._lock:
            removed = self.bucket(object_type).pop(record_id, None)
        _logger.debug("Deleted %s/%s", object_type, record_id)
        return removed

    def find_first(self, object_type: str, field: str, value: Any) -> Optional[str]:
        """Id of the first record (insertion order) whose field equals value."""
        with self._lock:
            for record_id, record in self.bucket(object_type).items():
                if record and record.get(field, _MISSING) == value:
                    return record_id
        return None


_MISSING = object()

# Shared by clients created without an explicit store.
_default_store = RecordStore()


def default_store() -> RecordStore:
    return _default_store


def reset_store() -> None:
    """Reset the shared store; call between tests that use the default clients."""
    _default_store.reset()
