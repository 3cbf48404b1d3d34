"""
Ingestion Boundary

DESIGN DECISION: Record shape is validated exactly once, here, before any
billing logic runs.

WHAT FAILS HERE (IngestionError):
- A record that is not a mapping
- A record without an id
- Link columns that should be lists but are not (members, transaction_ids)
- Prices or amounts that are not numbers
- Dates that do not parse
- A change log entry with no members

WHAT DOES NOT FAIL HERE:
- References to records that do not exist (unknown service id, dangling
  transaction id). Those are a normal part of a hand-edited spreadsheet
  and degrade to absence further down the pipeline.

Records that are already typed pass through untouched, so the report
functions accept either raw rows or ingested records.
"""

from typing import Any, Iterable, Mapping, Optional, Type, TypeVar

from pydantic import ValidationError

from src.models.records import (
    Member,
    Service,
    Snapshot,
    SourceRecord,
    SubscriptionChangeLogEntry,
    Transaction,
)


RecordT = TypeVar("RecordT", bound=SourceRecord)

TABLE_MODELS: dict[str, Type[SourceRecord]] = {
    "transactions": Transaction,
    "services": Service,
    "change_log": SubscriptionChangeLogEntry,
    "members": Member,
}


class IngestionError(ValueError):
    """A source record has the wrong shape to be billed."""

    def __init__(
        self,
        table: str,
        record_ref: str,
        message: str,
    ):
        self.table = table
        self.record_ref = record_ref
        self.message = message
        super().__init__(f"{table}[{record_ref}]: {message}")


def _describe(error: ValidationError) -> str:
    parts = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"]) or "record"
        parts.append(f"{location}: {detail['msg']}")
    return "; ".join(parts)


def _record_ref(row: Any, index: int) -> str:
    if isinstance(row, Mapping) and row.get("id"):
        return str(row["id"])
    return f"#{index}"


def ingest_records(
    table: str,
    rows: Iterable[Any],
    model: Optional[Type[RecordT]] = None,
) -> list[RecordT]:
    """
    Validate raw rows for one table into typed records.

    Raises:
        IngestionError: On the first malformed row
    """
    model = model or TABLE_MODELS[table]
    if rows is None:
        return []
    if isinstance(rows, (str, bytes, Mapping)):
        raise IngestionError(table, "*", "expected a list of records")

    records = []
    for index, row in enumerate(rows):
        if isinstance(row, model):
            records.append(row)
            continue
        if not isinstance(row, Mapping):
            raise IngestionError(
                table,
                f"#{index}",
                f"expected a mapping, got {type(row).__name__}",
            )
        try:
            records.append(model.model_validate(row))
        except ValidationError as e:
            raise IngestionError(table, _record_ref(row, index), _describe(e)) from e
    return records


def ingest_snapshot(
    transactions: Iterable[Any],
    services: Iterable[Any],
    change_log: Iterable[Any],
    members: Iterable[Any],
) -> Snapshot:
    """Validate all four record sets into one immutable snapshot."""
    return Snapshot(
        transactions=ingest_records("transactions", transactions),
        services=ingest_records("services", services),
        change_log=ingest_records("change_log", change_log),
        members=ingest_records("members", members),
    )
