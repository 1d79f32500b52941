"""Shared fixtures for the heatmap tests."""

import pytest

from heatmap.config import Settings
from heatmap.database import Database
from heatmap.storage.database_backend import DatabaseBackend
from heatmap.storage.gateway import PersistenceGateway
from heatmap.storage.local_backend import LocalBackend


SAMPLE_CSV = "Hour of the day,Day of the week,Conversions,Cost\n9,Monday,5,10\n"


class RecordingSleep:
    """Stand-in for asyncio.sleep that records requested delays."""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        storage_backend="local",
        database_url=f"sqlite:///{tmp_path / 'heatmap.db'}",
        local_storage_dir=str(tmp_path / "local-storage"),
        retry_base_delay_ms=1,
    )


@pytest.fixture
def database(settings):
    db = Database(settings.effective_database_url, settings).open()
    db.init_db()
    yield db
    db.dispose()


@pytest.fixture
def database_backend(database):
    return DatabaseBackend(database)


@pytest.fixture
def local_backend(settings):
    return LocalBackend(settings.local_storage_dir)


@pytest.fixture(params=["database", "local"])
def backend(request):
    """Each storage backend in turn."""
    return request.getfixturevalue(f"{request.param}_backend")


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def gateway(backend, recording_sleep):
    return PersistenceGateway(backend, sleep=recording_sleep)
