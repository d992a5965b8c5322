"""Date-range queries over a kind's archive file."""

import logging

from blobs import BlobStore
from ingestion.csv_ingest import load_text
from ingestion.csv_parser import parse_csv
from ingestion.dedup import resolve_latest
from ingestion.records import LoadRecord
from ingestion.schema import RecordKind

logger = logging.getLogger(__name__)


def query_range(
    blobs: BlobStore, kind: RecordKind, start_date: str, end_date: str
) -> list[LoadRecord]:
    """Return the resolved records with ``start_date <= date <= end_date``.

    Dates compare as strings, so bounds must be zero-padded ISO dates. The
    result is sorted by (date, time).
    """
    text = load_text(blobs, kind.archive_file)
    parsed = parse_csv(text, kind)

    in_range = (r for r in parsed.records if start_date <= r.date <= end_date)
    records = resolve_latest(in_range).records
    records.sort(key=lambda r: (r.date, r.time))

    logger.info(
        "Query %s [%s, %s]: %d records", kind.name, start_date, end_date, len(records)
    )
    return records
