"""
Main Orchestrator for Subscription Splitter

This module ties the data source to the billing pipeline and defines the
end-to-end flow for both reports:

    fetch snapshot -> ingest -> allocate / aggregate / summarize -> report

DESIGN DECISION: The orchestrator enforces the boundaries:
- Exactly one fetch per table per report, awaited before any billing runs
- Shape validation happens once, at ingestion
- No report is cached here; the dashboard decides how long to reuse one
- Every run is logged under its own correlation ID
"""

import time
from datetime import date, datetime
from typing import Callable, Optional, TypeVar, Union

from src.billing import owed_report, service_report
from src.billing.summary import DEFAULT_DATE_FORMAT
from src.config import get_settings
from src.models.records import Snapshot
from src.models.report import MemberOwedReport, ServiceReport
from src.observability import ReportLogger, configure_logging
from src.services.storage import (
    BillingDataSource,
    GoogleSheetsBillingSource,
    GoogleSheetsClient,
    InMemoryBillingSource,
)
from src.validation import ingest_snapshot


Moment = Union[date, datetime]
ReportT = TypeVar("ReportT")


class ReportFlow:
    """
    Orchestrates one report generation.

    Flow:
    1. Fetch → one retrieval per table from the data source
    2. Ingest → validate shape, normalize link fields
    3. Compute → run the pure billing pipeline against "now"
    4. Log → counts, row totals and timings

    A failure at any step propagates to the caller after being logged.
    """

    def __init__(
        self,
        source: BillingDataSource,
        date_format: str = DEFAULT_DATE_FORMAT,
    ):
        self._source = source
        self._date_format = date_format

    async def load_snapshot(
        self,
        run_logger: Optional[ReportLogger] = None,
    ) -> Snapshot:
        """Fetch and ingest a fresh snapshot of all four tables."""
        run_logger = run_logger or ReportLogger()
        started = time.perf_counter()

        raw = await self._source.fetch_snapshot()
        run_logger.snapshot_fetched(
            raw.counts,
            duration_ms=(time.perf_counter() - started) * 1000,
        )

        return ingest_snapshot(
            transactions=raw["transactions"],
            services=raw["services"],
            change_log=raw["change_log"],
            members=raw["members"],
        )

    async def member_owed_report(
        self,
        now: Optional[Moment] = None,
    ) -> list[MemberOwedReport]:
        """Paid vs. owed per payer and service."""
        return await self._run(
            "member_owed",
            owed_report,
            now,
        )

    async def service_report(
        self,
        now: Optional[Moment] = None,
    ) -> list[ServiceReport]:
        """Per-service payment standing of every member sharing it."""
        return await self._run(
            "service",
            lambda snapshot, moment: service_report(
                snapshot, moment, date_format=self._date_format,
            ),
            now,
        )

    async def _run(
        self,
        report: str,
        build: Callable[[Snapshot, Moment], list[ReportT]],
        now: Optional[Moment],
    ) -> list[ReportT]:
        run_logger = ReportLogger()
        started = time.perf_counter()
        try:
            snapshot = await self.load_snapshot(run_logger)
            result = build(snapshot, now if now is not None else datetime.now())
        except Exception as e:
            run_logger.report_failed(report, e)
            raise

        run_logger.report_generated(
            report,
            rows=len(result),
            duration_ms=(time.perf_counter() - started) * 1000,
        )
        return result


def create_report_flow(use_storage: bool = True) -> ReportFlow:
    """
    Factory function to create the report flow.

    Args:
        use_storage: Whether to read from Google Sheets.
                    Set to False to run against an empty in-memory source.

    Returns:
        A ready ReportFlow
    """
    settings = get_settings()
    report_settings = settings.report
    configure_logging(
        "DEBUG" if settings.app.debug_mode else report_settings.log_level
    )

    source: BillingDataSource
    if use_storage:
        try:
            source = GoogleSheetsBillingSource(GoogleSheetsClient())
        except Exception as e:
            # Sheets not configured - continue with no data
            ReportLogger().source_unavailable(e)
            source = InMemoryBillingSource()
    else:
        source = InMemoryBillingSource()

    return ReportFlow(
        source,
        date_format=report_settings.available_until_format,
    )
