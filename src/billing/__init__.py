"""
Billing Pipeline Package

Pricing -> cost allocation -> payment aggregation -> summaries -> reports.
Everything here is a pure function of a snapshot and an explicit "now".
"""

from src.billing.allocation import (
    PRICE_SPLIT_OFFSET,
    allocate_cost,
    allocate_costs,
    calendar_months_between,
    price_per_head,
)
from src.billing.payments import (
    aggregate_by_owner,
    group_and_sum,
    member_paid_amounts,
)
from src.billing.pricing import ServicePricingResolver
from src.billing.reports import (
    calculate_payment_summary,
    get_payment_summary,
    member_payment_summaries,
    owed_report,
    regroup_by_service,
    service_report,
)
from src.billing.summary import (
    calculate_available_until,
    calculate_credit,
    describe_distance,
)

__all__ = [
    # Pricing / allocation
    "PRICE_SPLIT_OFFSET",
    "ServicePricingResolver",
    "allocate_cost",
    "allocate_costs",
    "calendar_months_between",
    "price_per_head",
    # Payments
    "aggregate_by_owner",
    "group_and_sum",
    "member_paid_amounts",
    # Summaries
    "calculate_available_until",
    "calculate_credit",
    "describe_distance",
    # Reports
    "calculate_payment_summary",
    "get_payment_summary",
    "member_payment_summaries",
    "owed_report",
    "regroup_by_service",
    "service_report",
]
