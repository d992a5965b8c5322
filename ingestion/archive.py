"""LoadArchive: the operations exposed to the HTTP layer."""

from typing import Any, Iterable, Mapping

from blobs import BlobStore
from loadstore import DatabaseService
from ingestion.csv_ingest import (
    DEFAULT_CHUNK_SIZE,
    ChunkResult,
    IngestSummary,
    ingest_file,
    process_chunk,
)
from ingestion.reader import query_range
from ingestion.records import LoadRecord
from ingestion.schema import get_kind
from ingestion.writer import StoreResult, clear_tables, ensure_load_schema, store_records


class LoadArchive:
    """Binds a database service and a blob bucket; stateless between calls.

    Kinds are passed by name: "load" for actual load, or a forecast source
    ("d", "j", "mm", "mw").
    """

    def __init__(self, service: DatabaseService, blobs: BlobStore):
        self._service = service
        self._blobs = blobs

    def ensure_schema(self) -> None:
        ensure_load_schema(self._service)

    def process_chunk(
        self, file_name: str, start_line: int = 1, chunk_size: int = DEFAULT_CHUNK_SIZE
    ) -> ChunkResult:
        return process_chunk(self._service, self._blobs, file_name, start_line, chunk_size)

    def ingest_file(
        self, file_name: str, chunk_size: int = DEFAULT_CHUNK_SIZE, start_line: int = 1
    ) -> IngestSummary:
        return ingest_file(self._service, self._blobs, file_name, chunk_size, start_line)

    def store_records(
        self, kind: str, records: Iterable[LoadRecord | Mapping[str, Any]]
    ) -> StoreResult:
        return store_records(self._service, get_kind(kind), records)

    def query_range(self, kind: str, start_date: str, end_date: str) -> list[LoadRecord]:
        return query_range(self._blobs, get_kind(kind), start_date, end_date)

    def clear_all(self) -> None:
        clear_tables(self._service)
