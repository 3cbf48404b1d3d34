"""
Report Shaper and public report functions.

Both reports are pure functions of a snapshot and an explicit "now":

- calculate_payment_summary: per payer, what they paid against what they
  owe for each service they paid toward (the "amount outstanding" view)
- get_payment_summary: per service, every member sharing it with their
  credit, overdue flag and how far their credit carries them

Raw rows are accepted too; they go through ingestion first, which is the
only place either function can raise.
"""

from datetime import date, datetime
from typing import Any, Iterable, Optional, Union

from src.billing.allocation import allocate_costs
from src.billing.payments import aggregate_by_owner, index_transactions
from src.billing.pricing import ServicePricingResolver
from src.billing.summary import (
    DEFAULT_DATE_FORMAT,
    summarize_member,
    summarize_owed,
)
from src.models.records import Snapshot
from src.models.report import (
    MemberOwedReport,
    MemberPaymentSummary,
    ServiceMember,
    ServiceReport,
)
from src.validation import ingest_snapshot


Moment = Union[date, datetime]


def _resolve_now(now: Optional[Moment]) -> Moment:
    return now if now is not None else datetime.now()


def owed_report(snapshot: Snapshot, now: Moment) -> list[MemberOwedReport]:
    resolver = ServicePricingResolver(snapshot.services)
    allocations = allocate_costs(snapshot.change_log, resolver, now)
    return summarize_owed(
        aggregate_by_owner(snapshot.transactions),
        allocations,
        snapshot.members,
    )


def member_payment_summaries(
    snapshot: Snapshot,
    now: Moment,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> list[MemberPaymentSummary]:
    """Per-member bills, in member order."""
    resolver = ServicePricingResolver(snapshot.services)
    allocations_by_id = {}
    for allocation in allocate_costs(snapshot.change_log, resolver, now):
        allocations_by_id.setdefault(allocation.id, allocation)
    transactions_by_id = index_transactions(snapshot.transactions)

    return [
        summarize_member(
            member,
            allocations_by_id,
            transactions_by_id,
            now,
            date_format=date_format,
        )
        for member in snapshot.members
    ]


def regroup_by_service(
    service_names: Iterable[str],
    summaries: Iterable[MemberPaymentSummary],
) -> list[ServiceReport]:
    """
    Turn member-centric summaries into one entry per service.

    Members with no bill for a service are left out of that service.
    Every known service appears, even if nobody shares it.
    """
    summaries = list(summaries)
    reports = []
    for service_name in service_names:
        members = []
        for summary in summaries:
            info = summary.for_service(service_name)
            if info is not None:
                members.append(ServiceMember(name=summary.name, payment_info=info))
        reports.append(ServiceReport(service_name=service_name, members=members))
    return reports


def service_report(
    snapshot: Snapshot,
    now: Moment,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> list[ServiceReport]:
    resolver = ServicePricingResolver(snapshot.services)
    return regroup_by_service(
        resolver.service_names,
        member_payment_summaries(snapshot, now, date_format=date_format),
    )


def calculate_payment_summary(
    transactions: Iterable[Any],
    services: Iterable[Any],
    change_log: Iterable[Any],
    members: Iterable[Any],
    now: Optional[Moment] = None,
) -> list[MemberOwedReport]:
    """
    Paid vs. owed per payer and service.

    Raises:
        IngestionError: If any record is malformed
    """
    snapshot = ingest_snapshot(transactions, services, change_log, members)
    return owed_report(snapshot, _resolve_now(now))


def get_payment_summary(
    transactions: Iterable[Any],
    services: Iterable[Any],
    change_log: Iterable[Any],
    members: Iterable[Any],
    now: Optional[Moment] = None,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> list[ServiceReport]:
    """
    Service-centric payment report with credit and overdue status.

    Raises:
        IngestionError: If any record is malformed
    """
    snapshot = ingest_snapshot(transactions, services, change_log, members)
    return service_report(snapshot, _resolve_now(now), date_format=date_format)
