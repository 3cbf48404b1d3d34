"""
Billing Summarizer

Joins members, their change log entries, allocated costs and payments
into per-member bills.

Two summaries are built from the same building blocks:

1. Owed summary (per payer): for every (payer, service) with payments,
   how much they paid against how much their memberships accrued.
2. Payment summary (per member): for every service a member is billed
   for, what they paid, their credit, whether they are overdue and how
   far their credit carries them.
"""

import math
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Mapping, Optional, Union

import structlog
from dateutil.relativedelta import relativedelta

from src.billing.allocation import as_date
from src.billing.payments import group_and_sum, member_paid_amounts
from src.models.records import Member, Transaction
from src.models.report import (
    AvailableUntil,
    BilledService,
    CostAllocation,
    Credit,
    MemberOwedReport,
    MemberPaymentSummary,
    OwedService,
    OwnerPayments,
    PaymentInfo,
)


DEFAULT_DATE_FORMAT = "%b %d"

logger = structlog.get_logger(__name__)


# =============================================================================
# FORMATTING HELPERS
# =============================================================================

def format_amount(amount: Decimal) -> str:
    """Render an amount without a trailing '.0' on whole numbers."""
    if amount == amount.to_integral_value():
        return str(amount.quantize(Decimal("1")))
    return str(amount.normalize())


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def describe_distance(target: date, today: date) -> str:
    """
    Human label for the distance between two dates, e.g. "3 days",
    "about 2 months", "over 1 year". Direction is not included.

    Under a year the month figure is the nearest whole 30-day month,
    rounded half-up; whole calendar months only decide when the year
    labels take over.
    """
    days = abs((target - today).days)
    if days == 0:
        return "less than a minute"
    if days == 1:
        return "1 day"
    if days < 30:
        return f"{days} days"

    nearest_month = math.floor(days / 30 + 0.5)
    if days < 60:
        return f"about {_plural(nearest_month, 'month')}"

    later, earlier = max(target, today), min(target, today)
    delta = relativedelta(later, earlier)
    months = delta.years * 12 + delta.months
    if months < 12:
        return f"{nearest_month} months"

    years, remainder = divmod(months, 12)
    if remainder < 3:
        return f"about {_plural(years, 'year')}"
    if remainder < 9:
        return f"over {_plural(years, 'year')}"
    return f"almost {_plural(years + 1, 'year')}"


# =============================================================================
# CREDIT / OVERDUE
# =============================================================================

def calculate_credit(paid: Decimal, total_price_per_head: Decimal) -> Credit:
    credit = paid - total_price_per_head
    display = format_amount(credit)
    return Credit(
        display=f"+{display}" if credit > 0 else display,
        number=credit,
    )


def calculate_available_until(
    paid: Decimal,
    price_per_head: Decimal,
    total_price_per_head: Decimal,
    pay_day: Optional[int],
    now: Union[date, datetime],
    date_format: str = DEFAULT_DATE_FORMAT,
) -> Optional[AvailableUntil]:
    """
    Project how far a member's credit carries them.

    Starting from this month's billing day, move forward one month per
    full per-head payment of credit. Returns None when the member is
    overdue or the per-head price is not a positive amount.
    """
    credit = paid - total_price_per_head
    if credit < 0 or price_per_head <= 0:
        return None

    today = as_date(now)
    # Day is clamped to the month's last day (31 -> 30 in April)
    anchor = today + relativedelta(day=pay_day) if pay_day else today
    months_ahead = math.floor(credit / price_per_head)
    exact_date = anchor + relativedelta(months=months_ahead)

    return AvailableUntil(
        display_date=describe_distance(exact_date, today),
        date=exact_date.strftime(date_format),
        exact_date=exact_date,
    )


# =============================================================================
# OWED SUMMARY (per payer)
# =============================================================================

def need_to_pay(
    member_id: str,
    service_name: str,
    allocations: Iterable[CostAllocation],
) -> Decimal:
    """Accrued cost across every interval the member shared this service in."""
    return sum(
        (
            allocation.amount_due
            for allocation in allocations
            if allocation.is_billable
            and member_id in allocation.members
            and allocation.service_name == service_name
        ),
        Decimal("0"),
    )


def summarize_owed(
    owner_payments: Iterable[OwnerPayments],
    allocations: list[CostAllocation],
    members: Iterable[Member],
) -> list[MemberOwedReport]:
    names = {}
    for member in members:
        names.setdefault(member.id, member.name)

    reports = []
    for owner in owner_payments:
        lines = []
        for paid in owner.subscribed_service:
            owed = need_to_pay(owner.owner_id, paid.service, allocations)
            lines.append(OwedService(
                service=paid.service,
                total_paid_amount=paid.total_paid_amount,
                need_to_pay_amount=owed,
                outstanding=paid.total_paid_amount - owed,
            ))
        reports.append(MemberOwedReport(
            owner_id=owner.owner_id,
            member_name=names.get(owner.owner_id),
            subscribed_service=lines,
        ))
    return reports


# =============================================================================
# PAYMENT SUMMARY (per member)
# =============================================================================

def member_bill(
    member: Member,
    allocations_by_id: Mapping[str, CostAllocation],
) -> list[BilledService]:
    """
    A member's share of each service, summed across their intervals.

    Change log ids that resolve to nothing, or to an entry whose service
    is unknown, are left off the bill. A known service without a price
    is billed at zero.
    """
    rows = []
    for change_log_id in member.change_log_ids:
        allocation = allocations_by_id.get(change_log_id)
        if allocation is None:
            logger.warning(
                "unresolved_reference",
                kind="change_log",
                change_log_id=change_log_id,
                member_id=member.id,
            )
            continue
        if not allocation.is_billable:
            continue
        rows.append({
            "service_name": allocation.service_name,
            "price_per_head": allocation.price_per_head,
            "total_price_per_head": allocation.total_price_per_head,
            "subscription_pay_day": allocation.subscription_pay_day,
        })

    grouped = group_and_sum(
        rows,
        group_key="service_name",
        sum_keys=["price_per_head", "total_price_per_head"],
    )
    return [BilledService(**row) for row in grouped]


def summarize_member(
    member: Member,
    allocations_by_id: Mapping[str, CostAllocation],
    transactions_by_id: Mapping[str, Transaction],
    now: Union[date, datetime],
    date_format: str = DEFAULT_DATE_FORMAT,
) -> MemberPaymentSummary:
    paid_by_service = {
        paid.service_name: paid.amount
        for paid in member_paid_amounts(member, transactions_by_id)
    }

    summary = []
    for billed in member_bill(member, allocations_by_id):
        paid = paid_by_service.get(billed.service_name, Decimal("0"))
        credit = calculate_credit(paid, billed.total_price_per_head)
        summary.append(PaymentInfo(
            service_name=billed.service_name,
            price_per_head=billed.price_per_head,
            total_price_per_head=billed.total_price_per_head,
            subscription_pay_day=billed.subscription_pay_day,
            paid=paid,
            available_until=calculate_available_until(
                paid=paid,
                price_per_head=billed.price_per_head,
                total_price_per_head=billed.total_price_per_head,
                pay_day=billed.subscription_pay_day,
                now=now,
                date_format=date_format,
            ),
            credit=credit,
            is_overdue=credit.number < 0,
        ))

    return MemberPaymentSummary(name=member.name, payment_summary=summary)
