"""Latest-revision-wins deduplication keyed by (date, time).

Both the ingestion path and the range-query path resolve duplicates through
``supersedes``, so a key always resolves to the same row whichever path reads
the file.

Revisions are ordered by ``revision_key``: a revision that parses as an
ISO-8601 timestamp ranks above any token that does not, timestamps compare
chronologically (naive ones are taken as UTC), and unparseable tokens compare
lexically. That is a strict total order, so the resolved row does not depend
on the order rows arrive in.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable

from ingestion.records import LoadRecord, RecordKey

logger = logging.getLogger(__name__)


def parse_revision(revision: str) -> datetime | None:
    """Parse a revision as a timestamp, or return None if it is not one."""
    text = revision.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def revision_key(revision: str) -> tuple:
    parsed = parse_revision(revision)
    if parsed is None:
        return (0, revision)
    return (1, parsed.timestamp(), revision)


def supersedes(incoming: LoadRecord, existing: LoadRecord) -> bool:
    """Whether ``incoming`` should replace ``existing`` for the same key.

    - a revisioned row beats an unrevisioned one, never the reverse;
    - between two revisioned rows the later revision wins, ties keep the existing row;
    - between two unrevisioned rows (actual load) the last one seen wins.
    """
    if not incoming.revision:
        return not existing.revision
    if not existing.revision:
        return True
    return revision_key(incoming.revision) > revision_key(existing.revision)


@dataclass
class DedupResult:
    resolved: dict[RecordKey, LoadRecord] = field(default_factory=dict)
    duplicates: int = 0

    @property
    def records(self) -> list[LoadRecord]:
        return list(self.resolved.values())


def resolve_latest(records: Iterable[LoadRecord]) -> DedupResult:
    """Fold rows into one per (date, time), keeping the latest revision.

    Keys keep the position of their first appearance. ``duplicates`` counts
    the rows that landed on an already-occupied key, whether or not they
    replaced the row held there.
    """
    result = DedupResult()
    for record in records:
        existing = result.resolved.get(record.key)
        if existing is None:
            result.resolved[record.key] = record
            continue
        result.duplicates += 1
        if supersedes(record, existing):
            result.resolved[record.key] = record
    logger.debug(
        "Resolved %d unique keys (%d duplicates)", len(result.resolved), result.duplicates
    )
    return result
