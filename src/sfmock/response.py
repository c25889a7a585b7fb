from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional


@dataclass
class Response:
    """What the mock hands back in place of an HTTP response."""

    body: Any
    status_code: int = 200

    def json(self) -> Any:
        return self.body


def single(value: Any) -> Dict[str, Any]:
    """``{"id": value}``: a new id on create, the looked-up record on fetch."""
    return {"id": value}


def record_url(api_version: str, object_type: str, record_id: str) -> str:
    return f"/services/data/{api_version}/sobjects/{object_type}/{record_id}"


def collection(
    object_type: str, ids: Iterable[Optional[str]], api_version: str = "v60.0"
) -> Dict[str, Any]:
    """Query result body; None ids are dropped so no match yields no records."""
    records: List[Dict[str, Any]] = [
        {
            "attributes": {"type": object_type, "url": record_url(api_version, object_type, rid)},
            "Id": rid,
        }
        for rid in ids
        if rid is not None
    ]
    return {"totalSize": len(records), "done": True, "records": records}
