"""Services package."""

from src.services.storage import (
    BillingDataSource,
    ConnectionError,
    GoogleSheetsBillingSource,
    GoogleSheetsClient,
    InMemoryBillingSource,
    StorageError,
    TableNotFoundError,
)

__all__ = [
    # Data sources
    "BillingDataSource",
    "GoogleSheetsBillingSource",
    "GoogleSheetsClient",
    "InMemoryBillingSource",
    # Exceptions
    "ConnectionError",
    "StorageError",
    "TableNotFoundError",
]
