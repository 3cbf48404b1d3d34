"""
Report Models for Subscription Splitter

One explicit model per pipeline stage, from cost allocation through to
the two reports handed to the dashboard.

Report models serialize with camelCase keys, so
``report.model_dump(by_alias=True)`` yields ``pricePerHead``,
``isOverdue`` and so on for any JSON consumer.
"""

import datetime
from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ReportModel(BaseModel):
    """Base for all pipeline outputs."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# =============================================================================
# COST ALLOCATION
# =============================================================================

class ServicePrice(ReportModel):
    """What the pricing resolver knows about one service."""

    service_id: str
    name: Optional[str] = None
    price: Optional[Decimal] = None
    pay_day: Optional[int] = Field(
        default=None,
        ge=1,
        le=31,
        description="Billing anchor day of month"
    )


class CostAllocation(ReportModel):
    """
    A change log entry with its per-head cost worked out.

    price_per_head and total_price_per_head are None when the entry's
    service could not be resolved or has no price. A named service with
    no price still lands on bills, at no cost.
    """

    id: str
    service_id: Optional[str] = None
    service_name: Optional[str] = None
    members: list[str] = Field(default_factory=list)
    start_date: date
    end_date: Optional[date] = None
    price_per_head: Optional[Decimal] = None
    total_price_per_head: Optional[Decimal] = None
    subscription_pay_day: Optional[int] = None

    @property
    def is_billable(self) -> bool:
        return self.service_name is not None

    @property
    def amount_due(self) -> Decimal:
        return self.total_price_per_head or Decimal("0")


# =============================================================================
# PAYMENT AGGREGATION
# =============================================================================

class ServicePaid(ReportModel):
    """Total one owner paid toward one service."""

    service: str
    total_paid_amount: Decimal = Decimal("0")


class OwnerPayments(ReportModel):
    """All of one owner's payments, summed per service."""

    owner_id: str
    subscribed_service: list[ServicePaid] = Field(default_factory=list)


class PaidAmount(ReportModel):
    """A member's payments toward one service, by service name."""

    service_name: str
    amount: Decimal = Decimal("0")


class BilledService(ReportModel):
    """A member's combined share of one service across all their intervals."""

    service_name: str
    price_per_head: Decimal = Decimal("0")
    total_price_per_head: Decimal = Decimal("0")
    subscription_pay_day: Optional[int] = None


# =============================================================================
# MEMBER-CENTRIC OWED REPORT
# =============================================================================

class OwedService(ReportModel):
    """Paid vs. owed for one (owner, service) pair."""

    service: str
    total_paid_amount: Decimal
    need_to_pay_amount: Decimal
    outstanding: Decimal = Field(
        ...,
        description="total_paid_amount - need_to_pay_amount"
    )


class MemberOwedReport(ReportModel):
    owner_id: str
    member_name: Optional[str] = None
    subscribed_service: list[OwedService] = Field(default_factory=list)


# =============================================================================
# PAYMENT SUMMARY
# =============================================================================

class Credit(ReportModel):
    """Paid minus owed. Positive means ahead, negative means overdue."""

    display: str
    number: Decimal


class AvailableUntil(ReportModel):
    """How far a member's credit carries them."""

    display_date: str = Field(
        ...,
        description="Relative label, e.g. 'about 1 month'"
    )
    date: str = Field(
        ...,
        description="Formatted absolute date, e.g. 'Mar 05'"
    )
    exact_date: datetime.date


class PaymentInfo(ReportModel):
    """One member's bill for one service."""

    service_name: str
    price_per_head: Decimal
    total_price_per_head: Decimal
    subscription_pay_day: Optional[int] = None
    paid: Decimal
    available_until: Optional[AvailableUntil] = None
    credit: Credit
    is_overdue: bool


class MemberPaymentSummary(ReportModel):
    name: Optional[str] = None
    payment_summary: list[PaymentInfo] = Field(default_factory=list)

    def for_service(self, service_name: str) -> Optional[PaymentInfo]:
        for info in self.payment_summary:
            if info.service_name == service_name:
                return info
        return None


# =============================================================================
# SERVICE-CENTRIC REPORT
# =============================================================================

class ServiceMember(ReportModel):
    name: Optional[str] = None
    payment_info: PaymentInfo


class ServiceReport(ReportModel):
    """Everyone who shares one service, with their payment standing."""

    service_name: str
    members: list[ServiceMember] = Field(default_factory=list)
