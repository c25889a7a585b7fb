"""In-process mock of the Salesforce REST record API for tests."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("sfmock")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "unknown"

from .client import Client
from .config import MockConfig, configuration, configure, reset_configuration
from .store import RecordStore, default_store, reset_store

__all__ = [
    "Client",
    "MockConfig",
    "RecordStore",
    "__version__",
    "configuration",
    "configure",
    "default_store",
    "reset_configuration",
    "reset_store",
]
