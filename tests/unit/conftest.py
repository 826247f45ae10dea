import random

import pytest

from shortlinks.dao import MemoryLinkStoreDAO
from shortlinks.engine import LinkEngine, LinkKeySchema


# -------------------------------
# Shared fixtures
# -------------------------------


@pytest.fixture
def app_prefix():
    """Provide a consistent link store key prefix for testing."""
    return 'testapp:test'


@pytest.fixture
def store():
    """Provide an opened in-memory link store, closed after the test."""
    with MemoryLinkStoreDAO() as _store:
        yield _store


@pytest.fixture
def keys(app_prefix):
    return LinkKeySchema(prefix=app_prefix)


@pytest.fixture
def engine(store, app_prefix):
    """Provide an engine over the in-memory store with a seeded random source."""
    return LinkEngine(store, prefix=app_prefix, rng=random.Random(42))
