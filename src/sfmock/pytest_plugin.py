"""pytest fixtures for code under test that talks to Salesforce.

Registered through the ``pytest11`` entry point, so installing sfmock is
enough to use them:

    def test_creates_contact(sf_client):
        new_id = sf_client.create("Contact", {"LastName": "Smith"})
        assert sf_client.find("Contact", new_id) == {"LastName": "Smith"}
"""

from __future__ import annotations

import pytest

from .client import Client
from .config import MockConfig
from .store import RecordStore


@pytest.fixture
def sf_store():
    """A fresh record store, disposed when the test finishes."""
    store = RecordStore()
    yield store
    store.dispose()


@pytest.fixture
def sf_config() -> MockConfig:
    """Default settings; override with ``sf_config.replace(...)`` in your own fixture."""
    return MockConfig()


@pytest.fixture
def sf_client(sf_config, sf_store) -> Client:
    return Client(config=sf_config, store=sf_store)
