from __future__ import annotations

import json
from typing import List, Optional

import requests


class SFMockError(RuntimeError):
    """Base class for errors raised by the in-memory Salesforce mock."""


class ConflictError(SFMockError):
    """Raised when inserting a record whose id is already taken."""

    def __init__(self, object_type: str, record_id: str):
        self.object_type = object_type
        self.record_id = record_id
        super().__init__(f"Object {object_type} with {record_id} exists")


class SchemaMissingError(SFMockError):
    """Raised when an object type has no schema entry."""

    def __init__(self, object_type: str):
        self.object_type = object_type
        super().__init__(f"No schema for Salesforce object {object_type}")


class SchemaUnavailableError(SFMockError):
    """Raised when the schema file is not configured or cannot be read."""


class MalformedQueryError(SFMockError):
    """Raised when a SOQL string does not fit the supported equality grammar."""


class MalformedPathError(SFMockError):
    """Raised when a request path does not contain ``sobjects/<Type>``."""


class StoreDisposedError(SFMockError):
    """Raised when a disposed RecordStore is used."""


class MissingCredentialsError(RuntimeError):
    """Raised when the required Salesforce env vars are not present."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__("Missing required environment variables: " + ", ".join(missing))


def _error_response(status_code: int, error_code: str, message: str, url: str = "") -> requests.Response:
    """Build the response the live API would return for a failed call."""
    resp = requests.Response()
    resp.status_code = status_code
    resp.url = url
    resp.headers["Content-Type"] = "application/json"
    resp._content = json.dumps([{"errorCode": error_code, "message": message}]).encode("utf-8")
    resp.encoding = "utf-8"
    return resp


class SalesforceAPIError(requests.HTTPError, SFMockError):
    """An API-level failure, shaped like ``raise_for_status()`` on a live response.

    Code written against the live REST client catches ``requests.HTTPError``
    and inspects ``err.response``; the mock raises the same type so those
    handlers run unchanged.
    """

    status_code = 400
    error_code = "UNKNOWN_EXCEPTION"

    def __init__(self, message: str, url: Optional[str] = None):
        self.error_message = message
        response = _error_response(self.status_code, self.error_code, message, url or "")
        super().__init__(message, response=response)


class RecordNotFoundError(SalesforceAPIError):
    status_code = 404
    error_code = "NOT_FOUND"

    def __init__(self, record_id: str, url: Optional[str] = None):
        self.record_id = record_id
        super().__init__(
            f"Provided external ID field does not exist or is not accessible: {record_id}",
            url=url,
        )


class RequiredFieldMissingError(SalesforceAPIError):
    error_code = "REQUIRED_FIELD_MISSING"

    def __init__(self, fields: List[str], url: Optional[str] = None):
        self.fields = list(fields)
        super().__init__(
            "REQUIRED_FIELD_MISSING: Required fields are missing: [" + ", ".join(self.fields) + "]",
            url=url,
        )


class InvalidFieldError(SalesforceAPIError):
    error_code = "INVALID_FIELD_FOR_INSERT_UPDATE"

    def __init__(self, fields: List[str], url: Optional[str] = None):
        self.fields = list(fields)
        super().__init__(
            "INVALID_FIELD_FOR_INSERT_UPDATE: Unable to create/update fields: ["
            + ", ".join(self.fields)
            + "]. Please check the security settings of this field and verify that it is "
            "read/write for your profile or permission set",
            url=url,
        )
