"""Resumable, chunked ingestion of archive CSV files from blob storage."""

import logging
from dataclasses import dataclass, field

from blobs import BlobStore
from loadstore import DatabaseService
from ingestion.csv_parser import parse_csv
from ingestion.dedup import resolve_latest
from ingestion.errors import (
    InvalidRowWarning,
    NotFoundError,
    RowShapeWarning,
    keep_detail,
)
from ingestion.schema import kind_from_file_name
from ingestion.writer import StoreResult, store_records

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1000


@dataclass
class ChunkResult:
    processed_lines: int
    valid_records: int
    invalid_records: int
    duplicate_records: int
    inserted_count: int
    has_more: bool
    shape_warnings: int = 0
    store: StoreResult = field(default_factory=StoreResult)
    invalid_details: list[InvalidRowWarning] = field(default_factory=list)
    shape_details: list[RowShapeWarning] = field(default_factory=list)


@dataclass
class IngestSummary:
    file_name: str
    chunks: int = 0
    processed_lines: int = 0
    valid_records: int = 0
    invalid_records: int = 0
    duplicate_records: int = 0
    inserted_count: int = 0
    error_count: int = 0
    next_line: int = 1

    def add(self, result: ChunkResult) -> None:
        self.chunks += 1
        self.processed_lines += result.processed_lines
        self.valid_records += result.valid_records
        self.invalid_records += result.invalid_records
        self.duplicate_records += result.duplicate_records
        self.inserted_count += result.inserted_count
        self.error_count += result.store.error_count


def load_text(blobs: BlobStore, key: str) -> str:
    """Fetch an archive file as text, raising NotFoundError if it is absent."""
    text = blobs.get_text(key)
    if text is None:
        raise NotFoundError(key)
    return text


def process_chunk(
    service: DatabaseService,
    blobs: BlobStore,
    file_name: str,
    start_line: int,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> ChunkResult:
    """Ingest data lines ``[start_line, start_line + chunk_size)`` of one file.

    ``start_line`` is 1-based over data lines (the header is line 0). The
    whole file is fetched on every call and nothing is remembered between
    calls: the caller advances ``start_line`` by ``chunk_size`` while
    ``has_more`` is true. Re-running a window is safe since rows are upserted.
    """
    if start_line < 1:
        raise ValueError(f"start_line must be >= 1, got {start_line}")
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")

    text = load_text(blobs, file_name)
    kind = kind_from_file_name(file_name)
    logger.info(
        "Processing %s (%s) from line %d to %d",
        file_name,
        kind.name,
        start_line,
        start_line + chunk_size,
    )

    parsed = parse_csv(text, kind, start_line, chunk_size)

    valid = []
    invalid_details: list[InvalidRowWarning] = []
    invalid_records = 0
    for line_number, record in parsed.rows:
        if record.is_valid():
            valid.append(record)
            continue
        invalid_records += 1
        logger.warning("Invalid record at line %d: %s", line_number, record.as_dict())
        keep_detail(invalid_details, InvalidRowWarning(line_number, record.as_dict()))

    logger.info("Valid records: %d, Invalid records: %d", len(valid), invalid_records)

    dedup = resolve_latest(valid)
    logger.info(
        "Unique records after grouping: %d, duplicate records: %d",
        len(dedup.resolved),
        dedup.duplicates,
    )

    store = store_records(service, kind, dedup.records)

    return ChunkResult(
        processed_lines=parsed.window_lines,
        valid_records=len(valid),
        invalid_records=invalid_records,
        duplicate_records=dedup.duplicates,
        inserted_count=store.inserted_count,
        has_more=start_line + chunk_size < parsed.total_lines,
        shape_warnings=parsed.shape_warnings,
        store=store,
        invalid_details=invalid_details,
        shape_details=parsed.shape_details,
    )


def ingest_file(
    service: DatabaseService,
    blobs: BlobStore,
    file_name: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    start_line: int = 1,
) -> IngestSummary:
    """Drive ``process_chunk`` over a whole file, one window at a time.

    Each chunk's upserts are durable before the next chunk starts, so an
    interrupted run can resume from ``summary.next_line``.
    """
    summary = IngestSummary(file_name=file_name, next_line=start_line)
    while True:
        result = process_chunk(service, blobs, file_name, summary.next_line, chunk_size)
        summary.add(result)
        summary.next_line += chunk_size
        logger.info(
            "Chunk %d: inserted %d records (total: %d)",
            summary.chunks,
            result.inserted_count,
            summary.inserted_count,
        )
        if not result.has_more:
            break

    logger.info(
        "Ingestion of %s complete: %d lines, %d records inserted",
        file_name,
        summary.processed_lines,
        summary.inserted_count,
    )
    return summary
