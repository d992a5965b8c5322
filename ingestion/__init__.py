"""Chunked, revision-aware ingestion of load forecast and actual-load archives."""

from ingestion.archive import LoadArchive
from ingestion.csv_ingest import ChunkResult, IngestSummary, ingest_file, process_chunk
from ingestion.csv_parser import ParsedCsv, parse_csv
from ingestion.dedup import DedupResult, resolve_latest, revision_key, supersedes
from ingestion.errors import (
    EmptyInputError,
    IngestionError,
    InvalidRowWarning,
    NotFoundError,
    RowShapeWarning,
    SchemaError,
    UnknownKindError,
    UpsertError,
)
from ingestion.reader import query_range
from ingestion.records import LoadRecord
from ingestion.schema import (
    ACTUAL_LOAD,
    FORECAST_KINDS,
    KNOWN_TABLES,
    RecordKind,
    get_kind,
    kind_from_file_name,
)
from ingestion.writer import StoreResult, clear_tables, ensure_load_schema, store_records

__all__ = [
    "LoadArchive",
    "LoadRecord",
    "RecordKind",
    "ACTUAL_LOAD",
    "FORECAST_KINDS",
    "KNOWN_TABLES",
    "get_kind",
    "kind_from_file_name",
    "ParsedCsv",
    "parse_csv",
    "DedupResult",
    "resolve_latest",
    "revision_key",
    "supersedes",
    "ChunkResult",
    "IngestSummary",
    "process_chunk",
    "ingest_file",
    "StoreResult",
    "store_records",
    "clear_tables",
    "ensure_load_schema",
    "query_range",
    "IngestionError",
    "SchemaError",
    "EmptyInputError",
    "NotFoundError",
    "UnknownKindError",
    "RowShapeWarning",
    "InvalidRowWarning",
    "UpsertError",
]
