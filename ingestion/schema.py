"""Load archive table schema and record kinds."""

from dataclasses import dataclass

from ingestion.errors import UnknownKindError

ACTUAL_LOAD_KIND = "load"
ACTUAL_LOAD_PREFIX = "load_act"
FORECAST_SOURCES = ("d", "j", "mm", "mw")

CONFLICT_COLUMNS = ["date", "time"]


@dataclass(frozen=True)
class RecordKind:
    """One archive flavour: which columns a file needs and where rows go."""

    name: str
    table: str
    value_column: str
    has_revision: bool

    @property
    def columns(self) -> list[str]:
        cols = ["date", "time", self.value_column]
        if self.has_revision:
            cols.append("revision")
        return cols

    @property
    def archive_file(self) -> str:
        """Key of the full archive file read by range queries.

        Every kind, actual load included, is archived as "<name>_load_fcst_archive.csv".
        """
        return f"{self.name}_load_fcst_archive.csv"


ACTUAL_LOAD = RecordKind(
    name=ACTUAL_LOAD_KIND, table="load_act", value_column="load_act", has_revision=False
)

FORECAST_KINDS = {
    source: RecordKind(
        name=source,
        table=f"{source}_load_fcst",
        value_column="load_fcst",
        has_revision=True,
    )
    for source in FORECAST_SOURCES
}

KNOWN_KINDS = {ACTUAL_LOAD_KIND: ACTUAL_LOAD, **FORECAST_KINDS}
KNOWN_TABLES = [kind.table for kind in FORECAST_KINDS.values()] + [ACTUAL_LOAD.table]


def get_kind(name: str) -> RecordKind:
    """Look up a kind by name: "load" or a forecast source such as "mm"."""
    try:
        return KNOWN_KINDS[name.lower()]
    except KeyError:
        raise UnknownKindError(
            f"Unknown record kind {name!r}; expected one of {sorted(KNOWN_KINDS)}"
        ) from None


def kind_from_file_name(file_name: str) -> RecordKind:
    """Infer the record kind from an archive file name.

    "load_act..." files hold actual load; any other name starts with the
    forecast source token, e.g. "mw_load_fcst_2024.csv" -> source "mw".
    """
    if file_name.startswith(ACTUAL_LOAD_PREFIX):
        return ACTUAL_LOAD
    source = file_name.split("_", 1)[0].lower()
    if source not in FORECAST_KINDS:
        raise UnknownKindError(f"Cannot infer record kind from file name {file_name!r}")
    return FORECAST_KINDS[source]


def _forecast_ddl(table: str) -> str:
    return f"""
CREATE TABLE IF NOT EXISTS {table} (
    date          TEXT          NOT NULL,
    time          TEXT          NOT NULL,
    load_fcst     NUMERIC       NOT NULL,
    revision      TEXT,
    PRIMARY KEY (date, time)
);
"""


LOAD_ACT_DDL = """
CREATE TABLE IF NOT EXISTS load_act (
    date          TEXT          NOT NULL,
    time          TEXT          NOT NULL,
    load_act      NUMERIC       NOT NULL,
    PRIMARY KEY (date, time)
);
"""

LOAD_SCHEMA_DDL = "".join(_forecast_ddl(kind.table) for kind in FORECAST_KINDS.values()) + LOAD_ACT_DDL
