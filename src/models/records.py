"""
Source Record Models for Subscription Splitter

These models describe the four flat record sets the data source hands us:
services, members, subscription change log entries and transactions.

DESIGN DECISION: Field aliases are the source column names exactly as they
appear in the tabular source ("Name", "start date", ...). The Python
attribute names are what the rest of the code uses.

Linked-record columns arrive as lists even when they are conceptually
one-to-one (a transaction has ONE owner, an entry has ONE service). Those
are unwrapped here, so nothing past ingestion ever sees a list-wrapped
scalar.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from dateutil import parser as date_parser
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


def _first_of(value: Any) -> Any:
    """Unwrap a one-element link list. Scalars pass through untouched."""
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def _parse_date(value: Any) -> Any:
    """
    Accept ISO dates, ISO timestamps ("2024-01-15T00:00:00.000Z") and the
    month-first dates a spreadsheet displays ("1/15/2024").
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        return date_parser.parse(text).date()
    return value


class SourceRecord(BaseModel):
    """Base for every record coming out of the data source."""
    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        frozen=True,
        str_strip_whitespace=True,
        # Spreadsheets hand back numeric-looking ids as numbers
        coerce_numbers_to_str=True,
    )

    id: str = Field(
        ...,
        min_length=1,
        description="Stable record identifier"
    )


class Service(SourceRecord):
    """A subscription service the household shares."""

    name: Optional[str] = Field(
        default=None,
        alias="Name",
        description="Display name, also used to match transactions"
    )
    price: Optional[Decimal] = Field(
        default=None,
        description="Flat price for one billing period"
    )
    billing_date: Optional[date] = Field(
        default=None,
        alias="date",
        description="Billing anchor; only the day of month is used"
    )

    @field_validator('billing_date', mode='before')
    @classmethod
    def parse_billing_date(cls, v: Any) -> Any:
        return _parse_date(v)

    @property
    def pay_day(self) -> Optional[int]:
        """Day of month the service bills on."""
        return self.billing_date.day if self.billing_date else None


class Member(SourceRecord):
    """
    A household member.

    Service membership is NOT a direct field; it comes from the change
    log entries listed in change_log_ids.
    """

    name: Optional[str] = Field(
        default=None,
        alias="Name",
    )
    transaction_ids: list[str] = Field(
        default_factory=list,
    )
    change_log_ids: list[str] = Field(
        default_factory=list,
        alias="subscription change log",
    )

    @field_validator('transaction_ids', 'change_log_ids', mode='before')
    @classmethod
    def missing_links_are_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class SubscriptionChangeLogEntry(SourceRecord):
    """
    One membership interval: a fixed set of members split one service
    from start_date until end_date (or until now, if still open).
    """

    service_id: Optional[str] = Field(
        default=None,
        alias="service",
    )
    members: list[str] = Field(
        ...,
        min_length=1,
        description="Members splitting the service during this interval"
    )
    start_date: date = Field(
        ...,
        alias="start date",
    )
    end_date: Optional[date] = Field(
        default=None,
        alias="end date",
    )

    @field_validator('service_id', mode='before')
    @classmethod
    def unwrap_service(cls, v: Any) -> Any:
        return _first_of(v)

    @field_validator('start_date', 'end_date', mode='before')
    @classmethod
    def parse_dates(cls, v: Any) -> Any:
        return _parse_date(v)


class Transaction(SourceRecord):
    """A payment a member made toward a service."""

    owner_id: Optional[str] = Field(
        default=None,
        alias="owner",
        description="Paying member id"
    )
    service: Optional[str] = Field(
        default=None,
        description="Service name the payment was made for"
    )
    amount: Optional[Decimal] = Field(
        default=None,
    )

    @field_validator('owner_id', 'service', mode='before')
    @classmethod
    def unwrap_link(cls, v: Any) -> Any:
        return _first_of(v)


class Snapshot(BaseModel):
    """
    All four record sets for one report computation.

    Snapshots are immutable; a new one is fetched for every report.
    """
    model_config = ConfigDict(frozen=True)

    transactions: list[Transaction] = Field(default_factory=list)
    services: list[Service] = Field(default_factory=list)
    change_log: list[SubscriptionChangeLogEntry] = Field(default_factory=list)
    members: list[Member] = Field(default_factory=list)

    @property
    def counts(self) -> dict[str, int]:
        return {
            "transactions": len(self.transactions),
            "services": len(self.services),
            "change_log": len(self.change_log),
            "members": len(self.members),
        }
