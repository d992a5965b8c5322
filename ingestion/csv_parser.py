"""CSV parsing shared by chunk ingestion and range queries.

Line 0 of an archive file is the header; every later non-blank line is one
record. Lines are parsed independently, so a ragged line never swallows its
neighbours: a field count that differs from the header's is reported as a
RowShapeWarning and the line is still assigned positionally.
"""

import logging
from dataclasses import dataclass, field

from ingestion.errors import EmptyInputError, RowShapeWarning, SchemaError, keep_detail
from ingestion.records import RECORD_FIELDS, LoadRecord
from ingestion.schema import RecordKind

logger = logging.getLogger(__name__)

DELIMITER = ","


@dataclass
class ParsedCsv:
    headers: list[str]
    total_lines: int
    window_lines: int = 0
    rows: list[tuple[int, LoadRecord]] = field(default_factory=list)
    shape_warnings: int = 0
    shape_details: list[RowShapeWarning] = field(default_factory=list)

    @property
    def records(self) -> list[LoadRecord]:
        return [record for _, record in self.rows]


def split_fields(line: str) -> list[str]:
    """Split one line on the delimiter; quotes carry no meaning."""
    return line.split(DELIMITER)


def parse_header(line: str) -> list[str]:
    return [header.strip() for header in split_fields(line)]


def check_headers(headers: list[str], kind: RecordKind) -> None:
    """Raise SchemaError if any column the kind needs is absent."""
    missing = [column for column in kind.columns if column not in headers]
    if missing:
        raise SchemaError(missing, kind.name)


def parse_line(headers: list[str], values: list[str]) -> LoadRecord:
    """Assign values to record fields by header position.

    Unknown columns are ignored; a column with no (or a blank) value becomes None.
    """
    fields: dict[str, str | None] = {}
    for i, header in enumerate(headers):
        if header not in RECORD_FIELDS:
            continue
        value = values[i].strip() if i < len(values) else ""
        fields[header] = value or None
    return LoadRecord(
        date=fields.get("date") or "",
        time=fields.get("time") or "",
        load_fcst=fields.get("load_fcst"),
        load_act=fields.get("load_act"),
        revision=fields.get("revision"),
    )


def parse_csv(
    text: str,
    kind: RecordKind,
    start_line: int = 1,
    chunk_size: int | None = None,
) -> ParsedCsv:
    """Parse the data lines ``[start_line, start_line + chunk_size)`` of ``text``.

    Line numbers are 0-based with the header at 0, so the defaults parse every
    data line. Raises EmptyInputError if the text has no data lines and
    SchemaError if the header lacks the kind's columns.
    """
    lines = text.splitlines()
    if len(lines) < 2:
        raise EmptyInputError("CSV file is empty or has no data rows")

    headers = parse_header(lines[0])
    logger.debug("CSV headers: %s", headers)
    check_headers(headers, kind)

    start = max(start_line, 1)
    stop = len(lines) if chunk_size is None else min(start + chunk_size, len(lines))
    parsed = ParsedCsv(
        headers=headers, total_lines=len(lines), window_lines=max(stop - start, 0)
    )

    for line_number in range(start, stop):
        line = lines[line_number]
        if not line.strip():
            continue
        values = split_fields(line)
        if len(values) != len(headers):
            logger.warning(
                "Line %d has %d values, expected %d", line_number, len(values), len(headers)
            )
            parsed.shape_warnings += 1
            keep_detail(
                parsed.shape_details,
                RowShapeWarning(line_number, len(values), len(headers)),
            )
        parsed.rows.append((line_number, parse_line(headers, values)))

    return parsed
