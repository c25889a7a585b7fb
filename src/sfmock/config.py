from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from typing import Any, FrozenSet, Optional, Tuple

from .env_loader import load_env_files

_logger = logging.getLogger(__name__)

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def _env_list(name: str) -> Tuple[str, ...]:
    raw = os.getenv(name, "")
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class MockConfig:
    """Behaviour switches for the mock client."""

    # YAML file produced by `sfmock schema dump`; None disables required checks
    schema_file: Optional[str] = None

    error_on_required: bool = True
    raise_on_schema_missing: bool = False

    # Fields never reported as missing (e.g. set by triggers on the real org)
    required_exclusions: FrozenSet[str] = field(default_factory=frozenset)

    # Reject updates naming fields the stored record does not carry
    error_on_unknown_fields: bool = False

    # Objects the schema dumper describes when none are given on the CLI
    objects_for_schema: Tuple[str, ...] = ()

    # Used only to build record URLs in query results
    api_version: str = "v60.0"

    def __post_init__(self) -> None:
        object.__setattr__(self, "required_exclusions", frozenset(self.required_exclusions))
        object.__setattr__(self, "objects_for_schema", tuple(self.objects_for_schema))

    @classmethod
    def from_env(cls) -> MockConfig:
        """Load configuration from SFMOCK_* environment variables (and .env)."""
        load_env_files(quiet=True)
        return cls(
            schema_file=os.getenv("SFMOCK_SCHEMA_FILE") or None,
            error_on_required=_env_bool("SFMOCK_ERROR_ON_REQUIRED", True),
            raise_on_schema_missing=_env_bool("SFMOCK_RAISE_ON_SCHEMA_MISSING", False),
            required_exclusions=frozenset(_env_list("SFMOCK_REQUIRED_EXCLUSIONS")),
            error_on_unknown_fields=_env_bool("SFMOCK_ERROR_ON_UNKNOWN_FIELDS", False),
            objects_for_schema=_env_list("SFMOCK_OBJECTS_FOR_SCHEMA"),
            api_version=os.getenv("SFMOCK_API_VERSION", "v60.0"),
        )

    def replace(self, **changes: Any) -> MockConfig:
        return dataclasses.replace(self, **changes)


_current: Optional[MockConfig] = None


def configuration() -> MockConfig:
    """Return the process-wide configuration, reading the environment on first use."""
    global _current
    if _current is None:
        _current = MockConfig.from_env()
    return _current


def configure(**changes: Any) -> MockConfig:
    """Override selected settings of the process-wide configuration.

    Example: configure(schema_file="tests/fixtures/required_schema.yml", error_on_required=False)
    """
    global _current
    _current = configuration().replace(**changes)
    _logger.debug("sfmock configuration updated: %s", sorted(changes))
    return _current


def reset_configuration() -> None:
    """Forget overrides; the next configuration() call re-reads the environment."""
    global _current
    _current = None
