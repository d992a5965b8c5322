"""Idempotent persistence of resolved load records."""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from loadstore import DatabaseService
from ingestion.dedup import resolve_latest
from ingestion.errors import UpsertError, keep_detail
from ingestion.records import LoadRecord
from ingestion.schema import CONFLICT_COLUMNS, KNOWN_TABLES, LOAD_SCHEMA_DDL, RecordKind

logger = logging.getLogger(__name__)

PROGRESS_EVERY = 1000


@dataclass
class StoreResult:
    inserted_count: int = 0
    skipped_count: int = 0
    error_count: int = 0
    errors: list[UpsertError] = field(default_factory=list)


def ensure_load_schema(service: DatabaseService) -> None:
    """Create the forecast and actual-load tables if they don't exist."""
    service.execute_ddl(LOAD_SCHEMA_DDL)


def _as_record(record: LoadRecord | Mapping[str, Any]) -> LoadRecord:
    if isinstance(record, LoadRecord):
        return record
    return LoadRecord.from_mapping(record)


def store_records(
    service: DatabaseService,
    kind: RecordKind,
    records: Iterable[LoadRecord | Mapping[str, Any]],
) -> StoreResult:
    """Upsert records into the kind's table, one record per transaction.

    Records are deduplicated first, so callers may pass raw rows. A record
    without a value is skipped; a record the database rejects is counted in
    the result and the batch carries on. Every successful upsert counts as
    inserted, whether or not it changed the stored row.
    """
    resolved = resolve_latest(_as_record(r) for r in records).records
    logger.info(
        "Storing %d unique records into %s (%s)", len(resolved), kind.table, kind.name
    )

    result = StoreResult()
    for record in resolved:
        value = record.value(kind.value_column)
        if not value:
            logger.warning("Missing %s for record: %s", kind.value_column, record.as_dict())
            result.skipped_count += 1
            continue

        row = (record.date, record.time, value)
        if kind.has_revision:
            row += (record.revision,)

        try:
            with service.transaction():
                service.upsert(kind.table, kind.columns, [row], CONFLICT_COLUMNS)
        except service.driver_errors as e:
            logger.error("Error inserting record %s: %s", record.as_dict(), e)
            result.error_count += 1
            keep_detail(result.errors, UpsertError(record.date, record.time, str(e)))
            continue

        result.inserted_count += 1
        if result.inserted_count % PROGRESS_EVERY == 0:
            logger.info("Inserted %d records so far", result.inserted_count)

    logger.info(
        "Finished storing records. Inserted: %d, Skipped: %d, Errors: %d",
        result.inserted_count,
        result.skipped_count,
        result.error_count,
    )
    return result


def clear_tables(service: DatabaseService) -> None:
    """Delete every row from all load archive tables."""
    with service.transaction():
        for table in KNOWN_TABLES:
            service.delete_all(table)
    logger.info("Cleared tables: %s", ", ".join(KNOWN_TABLES))
