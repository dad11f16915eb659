"""Fixtures for onboarding service tests."""
from unittest.mock import MagicMock

import pytest

from creatoraide.services.onboarding_controller import OnboardingController, RecordingRouter
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


@pytest.fixture
def notifier():
    return MagicMock()


@pytest.fixture
def router():
    return RecordingRouter()


@pytest.fixture
def controller(store, notifier, router):
    return OnboardingController("user-1", store, notifier=notifier, router=router)
