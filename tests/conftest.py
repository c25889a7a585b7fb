import os
from pathlib import Path

import pytest

import sfmock

FIXTURES = Path(__file__).parent / "fixtures"
REQUIRED_SCHEMA = str(FIXTURES / "required_schema.yml")


@pytest.fixture(autouse=True)
def isolated_sandbox(monkeypatch):
    """
    Every test starts with an empty shared store and default configuration.
    Ambient SFMOCK_* variables from the developer's shell are ignored.
    """
    for key in list(os.environ):
        if key.startswith("SFMOCK_"):
            monkeypatch.delenv(key, raising=False)
    sfmock.reset_configuration()
    sfmock.reset_store()
    yield
    sfmock.reset_store()
    sfmock.reset_configuration()


@pytest.fixture
def required_schema() -> str:
    return REQUIRED_SCHEMA
