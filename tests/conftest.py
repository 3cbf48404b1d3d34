"""
Shared fixtures: one small household sharing two services.

Snapshot pinned at 2024-05-15.

- Spotify (300/month, bills on the 5th): Alice, Bob and Carol since
  2024-01-10, still open. Per head round(300 / 4) = 75, four calendar
  months accrued = 300 each.
- YouTube Premium (239/month, bills on the 20th): Bob alone from
  2024-03-01 to 2024-04-30. Per head round(239 / 2) = 120, one month
  accrued = 120.

Payments: Alice 150 + 300 to Spotify, Bob 100 to YouTube Premium and
50 to Netflix (a service nobody tracks). Carol has paid nothing.
"""

from datetime import datetime

import pytest


NOW = datetime(2024, 5, 15, 12, 0)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def services_rows():
    return [
        {"id": "svc1", "Name": "Spotify", "price": 300, "date": "2021-03-05"},
        {
            "id": "svc2",
            "Name": "YouTube Premium",
            "price": 239,
            "date": "2022-01-20T00:00:00.000Z",
        },
    ]


@pytest.fixture
def change_log_rows():
    return [
        {
            "id": "log1",
            "service": ["svc1"],
            "members": ["mem1", "mem2", "mem3"],
            "start date": "2024-01-10",
        },
        {
            "id": "log2",
            "service": ["svc2"],
            "members": ["mem2"],
            "start date": "2024-03-01",
            "end date": "2024-04-30",
        },
    ]


@pytest.fixture
def transactions_rows():
    return [
        {"id": "t1", "owner": ["mem1"], "service": "Spotify", "amount": 150},
        {"id": "t2", "owner": ["mem1"], "service": "Spotify", "amount": 300},
        {"id": "t3", "owner": ["mem2"], "service": "YouTube Premium", "amount": 100},
        {"id": "t4", "owner": ["mem2"], "service": "Netflix", "amount": 50},
    ]


@pytest.fixture
def members_rows():
    return [
        {
            "id": "mem1",
            "Name": "Alice",
            "transaction_ids": ["t1", "t2"],
            "subscription change log": ["log1"],
        },
        {
            "id": "mem2",
            "Name": "Bob",
            "transaction_ids": ["t3", "t4"],
            "subscription change log": ["log1", "log2"],
        },
        {
            "id": "mem3",
            "Name": "Carol",
            "subscription change log": ["log1"],
        },
    ]


@pytest.fixture
def tables(transactions_rows, services_rows, change_log_rows, members_rows):
    return {
        "transactions": transactions_rows,
        "services": services_rows,
        "change_log": change_log_rows,
        "members": members_rows,
    }
