import pytest

from libtech_directory.catalog.loader import parse_csv
from libtech_directory.catalog.schema import SchemaResolver
from libtech_directory.sessions.store import browse_sessions
from libtech_directory.state import app_state

from samples import SAMPLE_CSV


@pytest.fixture
def sample_dataset():
    return parse_csv(SAMPLE_CSV, "fr")


@pytest.fixture
def sample_resolver(sample_dataset):
    return SchemaResolver(sample_dataset.headers, "fr")


@pytest.fixture
def installed_sample(sample_dataset):
    """Install the sample dataset into the global application state."""
    app_state.reset()
    browse_sessions.clear_all()
    generation = app_state.begin_load()
    app_state.install(sample_dataset, generation)
    yield sample_dataset
    app_state.reset()
    browse_sessions.clear_all()
