import pytest

from apps.regions.services.store import ReferenceDataStore


@pytest.fixture
def store() -> ReferenceDataStore:
    return ReferenceDataStore()


@pytest.fixture
def alberta(db, store):
    return store.create_province("Alberta")


@pytest.fixture
def ontario(db, store):
    return store.create_province("Ontario")
