"""Ingestion and record validation package."""

from src.validation.ingestion import (
    TABLE_MODELS,
    IngestionError,
    ingest_records,
    ingest_snapshot,
)

__all__ = [
    "TABLE_MODELS",
    "IngestionError",
    "ingest_records",
    "ingest_snapshot",
]
