"""Structured logging package."""

from src.observability.logger import (
    ReportEventType,
    ReportLogger,
    configure_logging,
    create_correlation_id,
)

__all__ = [
    "ReportEventType",
    "ReportLogger",
    "configure_logging",
    "create_correlation_id",
]
