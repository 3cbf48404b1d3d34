"""
Cost Allocator

Turns a subscription change log entry into a per-head cost and the total
each member has accrued over the entry's active period.

The price is split across len(members) + PRICE_SPLIT_OFFSET heads. The
offset is applied uniformly to every entry; see DESIGN.md.

Elapsed time is counted in calendar months: Jan 31 -> Feb 1 is one month,
Feb 1 -> Feb 28 is zero. "now" is always passed in by the caller.
"""

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Union

import structlog

from src.billing.pricing import ServicePricingResolver
from src.models.records import SubscriptionChangeLogEntry
from src.models.report import CostAllocation


PRICE_SPLIT_OFFSET = 1

WHOLE_UNIT = Decimal("1")

logger = structlog.get_logger(__name__)


def as_date(moment: Union[date, datetime]) -> date:
    """Reduce a datetime to its calendar date."""
    if isinstance(moment, datetime):
        return moment.date()
    return moment


def calendar_months_between(start: date, end: date) -> int:
    """
    Whole calendar months from start to end, ignoring the day of month.

    A period that has not started yet counts as zero months.
    """
    months = (end.year - start.year) * 12 + (end.month - start.month)
    return max(months, 0)


def price_per_head(
    price: Optional[Decimal],
    member_count: int,
) -> Optional[Decimal]:
    """Split price across the members plus the fixed offset, rounded half-up."""
    if price is None:
        return None
    heads = member_count + PRICE_SPLIT_OFFSET
    return (Decimal(price) / heads).quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP)


def total_price_per_head(
    per_head: Optional[Decimal],
    start_date: date,
    end_date: Optional[date],
    now: Union[date, datetime],
) -> Optional[Decimal]:
    """per_head times the calendar months the entry has been active."""
    if per_head is None:
        return None
    active_until = end_date or as_date(now)
    return per_head * calendar_months_between(start_date, active_until)


def allocate_cost(
    entry: SubscriptionChangeLogEntry,
    resolver: ServicePricingResolver,
    now: Union[date, datetime],
) -> CostAllocation:
    """
    Work out per-head and accrued cost for one change log entry.

    An entry whose service cannot be resolved keeps its identity but
    carries no service name and no amounts.
    """
    service = resolver.resolve(entry.service_id)
    if service is None:
        logger.warning(
            "unresolved_reference",
            kind="service",
            service_id=entry.service_id,
            change_log_id=entry.id,
        )

    per_head = price_per_head(
        service.price if service else None,
        len(entry.members),
    )

    return CostAllocation(
        id=entry.id,
        service_id=entry.service_id,
        service_name=service.name if service else None,
        members=list(entry.members),
        start_date=entry.start_date,
        end_date=entry.end_date,
        price_per_head=per_head,
        total_price_per_head=total_price_per_head(
            per_head,
            entry.start_date,
            entry.end_date,
            now,
        ),
        subscription_pay_day=service.pay_day if service else None,
    )


def allocate_costs(
    entries: Iterable[SubscriptionChangeLogEntry],
    resolver: ServicePricingResolver,
    now: Union[date, datetime],
) -> list[CostAllocation]:
    return [allocate_cost(entry, resolver, now) for entry in entries]
