"""
Kernel test configuration.

Stores are function-scoped and torn down after each test. The catalog is
shared, which is safe because it hands out copies.
"""

import pytest

from editor.kernel.catalog import default_catalog
from editor.kernel.store import DocumentStore


@pytest.fixture
def store():
    s = DocumentStore()
    yield s
    s.teardown()


@pytest.fixture
def business(store):
    """Store with the business starter template loaded."""
    store.select_template("business")
    return store


@pytest.fixture
def showcase(store):
    """Store with the showcase template, whose hero section is locked-edit."""
    store.select_template("showcase")
    return store


@pytest.fixture
def business_payload():
    return default_catalog.payload("business")
