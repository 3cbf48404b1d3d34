"""
Data Source Package

Provides the abstract data source interface and concrete implementations.
Currently implements Google Sheets as the backend, plus an in-memory
source for tests, but designed to be swappable.
"""

from src.services.storage.interface import (
    TABLE_NAMES,
    BillingDataSource,
    ConnectionError,
    RawSnapshot,
    StorageError,
    TableNotFoundError,
)
from src.services.storage.google_sheets import (
    GoogleSheetsBillingSource,
    GoogleSheetsClient,
)
from src.services.storage.memory import InMemoryBillingSource

__all__ = [
    # Interfaces
    "TABLE_NAMES",
    "BillingDataSource",
    "RawSnapshot",
    # Exceptions
    "ConnectionError",
    "StorageError",
    "TableNotFoundError",
    # Implementations
    "GoogleSheetsBillingSource",
    "GoogleSheetsClient",
    "InMemoryBillingSource",
]
