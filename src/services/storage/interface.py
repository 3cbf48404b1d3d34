"""
Abstract Data Source Interface

DESIGN DECISION: Reports never talk to a backend directly. They are
handed a snapshot fetched through this interface. This allows us to:
1. Swap Google Sheets for another tabular backend later
2. Use in-memory records for testing
3. Keep billing logic free of I/O

The interface is read-only. Editing the household's records is the
backend's job, not ours.
"""

from abc import ABC, abstractmethod
from typing import Any


# Logical table names every data source must serve
TABLE_NAMES = ("transactions", "services", "change_log", "members")

RawRecord = dict[str, Any]


class RawSnapshot(dict):
    """Logical table name -> list of raw records, as fetched."""

    @property
    def counts(self) -> dict[str, int]:
        return {table: len(rows) for table, rows in self.items()}


class BillingDataSource(ABC):
    """
    Abstract interface for the four billing record sets.

    Implementations return raw mappings; validation happens later, at
    ingestion, so every backend gets the same checks.
    """

    @abstractmethod
    async def fetch_records(self, table: str) -> list[RawRecord]:
        """
        Fetch every record of one logical table.

        Args:
            table: One of TABLE_NAMES

        Returns:
            List of records, each a mapping with an "id" key

        Raises:
            TableNotFoundError: If the backend has no such table
            StorageError: If the fetch fails
        """
        pass

    async def fetch_snapshot(self) -> RawSnapshot:
        """
        Fetch all four tables, one retrieval each.

        No retry happens here; a failed table fails the whole snapshot.
        """
        snapshot = RawSnapshot()
        for table in TABLE_NAMES:
            snapshot[table] = await self.fetch_records(table)
        return snapshot


class StorageError(Exception):
    """Base exception for data source operations."""
    pass


class TableNotFoundError(StorageError):
    """Requested table does not exist in the backend."""
    pass


class ConnectionError(StorageError):
    """Could not connect to the backend."""
    pass
