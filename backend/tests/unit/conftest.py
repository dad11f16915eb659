"""Conftest for unit tests - catalogs and in-memory stores."""
import pytest

from creatoraide.services.persistence import InMemoryKeyValueStore
from creatoraide.services.progress_store import ProgressStore
from creatoraide.services.step_catalog import Step, StepCatalog, get_step_catalog


@pytest.fixture
def catalog():
    return get_step_catalog()


@pytest.fixture
def small_catalog():
    """Three steps worth 10/20/70 points."""
    return StepCatalog([
        Step(id="intro", order=0, points=10, title="Intro"),
        Step(id="middle", order=1, points=20, title="Middle", route="/middle"),
        Step(id="completed", order=2, points=70, title="Done"),
    ])


@pytest.fixture
def kv_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def store(kv_store, catalog):
    return ProgressStore(kv_store, catalog)
