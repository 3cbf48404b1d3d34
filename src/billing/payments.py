"""
Payment Aggregator

Two ways of summing what people paid:

- by owner: every transaction grouped by payer, then by service
- by member: one member's transaction ids resolved and summed per
  service name

Neither raises for dangling references. A transaction id with no record,
a transaction with no service or a zero/missing amount simply adds
nothing.
"""

from decimal import Decimal
from typing import Any, Iterable, Mapping, Sequence

import structlog

from src.models.records import Member, Transaction
from src.models.report import OwnerPayments, PaidAmount, ServicePaid


logger = structlog.get_logger(__name__)


def group_and_sum(
    rows: Iterable[Mapping[str, Any]],
    group_key: str,
    sum_keys: Sequence[str],
) -> list[dict[str, Any]]:
    """
    Group rows by group_key and sum the sum_keys within each group.

    Groups come out in first-seen order. Fields that are not summed are
    taken from the first row of the group. Missing summands count as 0.
    """
    groups: dict[Any, dict[str, Any]] = {}
    for row in rows:
        key = row[group_key]
        if key not in groups:
            groups[key] = {
                **row,
                **{field: Decimal("0") for field in sum_keys},
            }
        for field in sum_keys:
            groups[key][field] += row.get(field) or 0
    return list(groups.values())


def index_transactions(
    transactions: Iterable[Transaction],
) -> dict[str, Transaction]:
    return {transaction.id: transaction for transaction in transactions}


def aggregate_by_owner(
    transactions: Iterable[Transaction],
) -> list[OwnerPayments]:
    """
    Sum every transaction per payer and service.

    Payers come out in first-seen order. A payer whose transactions all
    lack a service still appears, with nothing under it.
    """
    by_owner: dict[str, list[Transaction]] = {}
    for transaction in transactions:
        if transaction.owner_id is None:
            logger.warning(
                "unresolved_reference",
                kind="owner",
                transaction_id=transaction.id,
            )
            continue
        by_owner.setdefault(transaction.owner_id, []).append(transaction)

    results = []
    for owner_id, owned in by_owner.items():
        totals = group_and_sum(
            (
                {"service": t.service, "total_paid_amount": t.amount}
                for t in owned
                if t.service
            ),
            group_key="service",
            sum_keys=["total_paid_amount"],
        )
        results.append(OwnerPayments(
            owner_id=owner_id,
            subscribed_service=[ServicePaid(**row) for row in totals],
        ))
    return results


def member_paid_amounts(
    member: Member,
    transactions_by_id: Mapping[str, Transaction],
) -> list[PaidAmount]:
    """What one member has paid, summed per service name."""
    pairs = []
    for transaction_id in member.transaction_ids:
        transaction = transactions_by_id.get(transaction_id)
        if transaction is None:
            logger.warning(
                "unresolved_reference",
                kind="transaction",
                transaction_id=transaction_id,
                member_id=member.id,
            )
            continue
        if not transaction.amount or not transaction.service:
            continue
        pairs.append({
            "service_name": transaction.service,
            "amount": transaction.amount,
        })

    return [
        PaidAmount(**row)
        for row in group_and_sum(pairs, "service_name", ["amount"])
    ]
