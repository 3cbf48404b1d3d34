"""
In-Memory Data Source

Serves preloaded record lists. Used by tests and as the fallback when no
spreadsheet is configured.
"""

import copy
from typing import Optional

from src.services.storage.interface import (
    TABLE_NAMES,
    BillingDataSource,
    RawRecord,
    TableNotFoundError,
)


class InMemoryBillingSource(BillingDataSource):
    """Holds the four tables as plain lists of dicts."""

    def __init__(self, tables: Optional[dict[str, list[RawRecord]]] = None):
        tables = tables or {}
        unknown = set(tables) - set(TABLE_NAMES)
        if unknown:
            raise TableNotFoundError(f"Unknown tables: {sorted(unknown)}")
        self._tables = {name: list(tables.get(name, [])) for name in TABLE_NAMES}

    async def fetch_records(self, table: str) -> list[RawRecord]:
        if table not in self._tables:
            raise TableNotFoundError(f"Table not found: {table}")
        # Callers get their own copy so a snapshot never changes under them
        return copy.deepcopy(self._tables[table])
