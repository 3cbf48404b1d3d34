"""
Report Logger

DESIGN DECISION: Every report run logs what it fetched, what it produced
and how long it took, as structured JSON. Nothing is persisted; these
logs exist for debugging a surprising number on the dashboard.

Every event of one report run carries the same correlation ID.
"""

import logging
import sys
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

import structlog


class ReportEventType(str, Enum):
    """Named events emitted around a report run."""
    SNAPSHOT_FETCHED = "snapshot_fetched"
    REPORT_GENERATED = "report_generated"
    REPORT_FAILED = "report_failed"
    SOURCE_UNAVAILABLE = "source_unavailable"


def configure_logging(level: str = "INFO") -> None:
    """Configure structlog with stdlib integration and JSON output."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class ReportLogger:
    """
    Structured logging for report runs.

    Create one per run; every event it emits carries the run's
    correlation ID.
    """

    def __init__(self, correlation_id: Optional[UUID] = None):
        self.correlation_id = correlation_id or create_correlation_id()
        self._logger = structlog.get_logger("src.reports").bind(
            correlation_id=str(self.correlation_id),
        )

    def snapshot_fetched(self, counts: dict[str, int], duration_ms: float) -> None:
        self._logger.info(
            ReportEventType.SNAPSHOT_FETCHED.value,
            duration_ms=round(duration_ms, 1),
            **counts,
        )

    def report_generated(
        self,
        report: str,
        rows: int,
        duration_ms: float,
    ) -> None:
        self._logger.info(
            ReportEventType.REPORT_GENERATED.value,
            report=report,
            rows=rows,
            duration_ms=round(duration_ms, 1),
        )

    def report_failed(self, report: str, error: Exception) -> None:
        self._logger.error(
            ReportEventType.REPORT_FAILED.value,
            report=report,
            error_type=type(error).__name__,
            error=str(error),
        )

    def source_unavailable(self, error: Exception) -> None:
        self._logger.warning(
            ReportEventType.SOURCE_UNAVAILABLE.value,
            error_type=type(error).__name__,
            error=str(error),
        )


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use one per report run.
    """
    return uuid4()
