"""
Data Models Package

Source records (what the data source hands us) and report models (what
each pipeline stage produces). Everything flowing through the system
conforms to one of these schemas.
"""

from src.models.records import (
    Member,
    Service,
    Snapshot,
    SourceRecord,
    SubscriptionChangeLogEntry,
    Transaction,
)
from src.models.report import (
    AvailableUntil,
    BilledService,
    CostAllocation,
    Credit,
    MemberOwedReport,
    MemberPaymentSummary,
    OwedService,
    OwnerPayments,
    PaidAmount,
    PaymentInfo,
    ServiceMember,
    ServicePaid,
    ServicePrice,
    ServiceReport,
)

__all__ = [
    # Source records
    "Member",
    "Service",
    "Snapshot",
    "SourceRecord",
    "SubscriptionChangeLogEntry",
    "Transaction",
    # Report models
    "AvailableUntil",
    "BilledService",
    "CostAllocation",
    "Credit",
    "MemberOwedReport",
    "MemberPaymentSummary",
    "OwedService",
    "OwnerPayments",
    "PaidAmount",
    "PaymentInfo",
    "ServiceMember",
    "ServicePaid",
    "ServicePrice",
    "ServiceReport",
]
