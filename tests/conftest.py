"""Shared test fixtures."""

import pytest

from blobs import InMemoryBlobStore
from loadstore import create_service
from ingestion import LoadArchive, ensure_load_schema

FORECAST_HEADER = "date,time,load_fcst,revision"
ACTUAL_HEADER = "date,time,load_act"


def csv_text(header: str, *lines: str) -> str:
    return "\n".join((header, *lines)) + "\n"


@pytest.fixture
def db_service(tmp_path):
    """Provide a fresh SQLite DatabaseService for each test."""
    db_path = tmp_path / "test.db"
    service = create_service(f"sqlite:///{db_path}")
    service.connect()
    yield service
    service.close()


@pytest.fixture
def load_db(db_service):
    """A SQLite service with the load archive tables created."""
    ensure_load_schema(db_service)
    return db_service


@pytest.fixture
def blob_store():
    return InMemoryBlobStore()


@pytest.fixture
def archive(load_db, blob_store):
    return LoadArchive(load_db, blob_store)


def fetch_table(service, table: str) -> list[dict]:
    with service.transaction():
        return service.execute(f"SELECT * FROM {table} ORDER BY date, time")
