"""
Tests for Subscription Splitter models and ingestion

Test strategy:
1. Unit tests for record normalization and the ingestion boundary
2. Unit tests for each billing stage with a pinned "now"
3. Flow tests against the in-memory data source (no real API calls)
"""

import pytest
from datetime import date
from decimal import Decimal

from src.models.records import (
    Member,
    Service,
    SubscriptionChangeLogEntry,
    Transaction,
)
from src.models.report import Credit, PaymentInfo
from src.validation import IngestionError, ingest_records, ingest_snapshot


class TestRecordModels:
    """Tests for source record normalization."""

    def test_service_from_source_columns(self):
        """Test Service reads the spreadsheet column names."""
        service = Service.model_validate(
            {"id": "svc1", "Name": "Spotify", "price": 300, "date": "2021-03-05"}
        )
        assert service.name == "Spotify"
        assert service.price == Decimal("300")
        assert service.pay_day == 5

    def test_service_date_accepts_timestamp(self):
        """Test ISO timestamps are reduced to their date."""
        service = Service.model_validate(
            {"id": "svc1", "date": "2022-01-20T00:00:00.000Z"}
        )
        assert service.billing_date == date(2022, 1, 20)
        assert service.pay_day == 20

    def test_service_without_date_has_no_pay_day(self):
        """Test a missing billing date leaves pay_day empty."""
        service = Service(id="svc1", name="Spotify")
        assert service.pay_day is None
        assert service.price is None

    def test_transaction_unwraps_owner_list(self):
        """Test one-element owner lists become a scalar id."""
        transaction = Transaction.model_validate(
            {"id": "t1", "owner": ["mem1"], "service": "Spotify", "amount": 150}
        )
        assert transaction.owner_id == "mem1"
        assert transaction.service == "Spotify"

    def test_transaction_unwraps_service_list(self):
        """Test a service lookup delivered as a list is unwrapped too."""
        transaction = Transaction.model_validate(
            {"id": "t1", "owner": "mem1", "service": ["Spotify"]}
        )
        assert transaction.owner_id == "mem1"
        assert transaction.service == "Spotify"
        assert transaction.amount is None

    def test_transaction_empty_owner_list_is_none(self):
        """Test an empty link list means no owner."""
        transaction = Transaction.model_validate({"id": "t1", "owner": []})
        assert transaction.owner_id is None

    def test_change_log_entry_from_source_columns(self):
        """Test change log entries read spaced column names and unwrap service."""
        entry = SubscriptionChangeLogEntry.model_validate({
            "id": "log1",
            "service": ["svc1"],
            "members": ["mem1", "mem2"],
            "start date": "2024-01-10",
            "end date": "2024-03-31",
        })
        assert entry.service_id == "svc1"
        assert entry.start_date == date(2024, 1, 10)
        assert entry.end_date == date(2024, 3, 31)

    def test_change_log_entry_blank_end_date_is_open(self):
        """Test a blank end date leaves the entry open."""
        entry = SubscriptionChangeLogEntry.model_validate({
            "id": "log1",
            "service": ["svc1"],
            "members": ["mem1"],
            "start date": "2024-01-10",
            "end date": "",
        })
        assert entry.end_date is None

    def test_change_log_entry_accepts_spreadsheet_dates(self):
        """Test month-first dates as a spreadsheet displays them."""
        entry = SubscriptionChangeLogEntry.model_validate({
            "id": "log1",
            "service": ["svc1"],
            "members": ["mem1"],
            "start date": "1/10/2024",
            "end date": "3/31/2024",
        })
        assert entry.start_date == date(2024, 1, 10)
        assert entry.end_date == date(2024, 3, 31)

    def test_transaction_date_column_is_ignored(self):
        """Test a payment date in any format does not block ingestion."""
        transaction = Transaction.model_validate(
            {"id": "t1", "owner": ["mem1"], "date": "sometime in May"}
        )
        assert transaction.owner_id == "mem1"

    def test_member_missing_links_default_empty(self):
        """Test a member without links gets empty lists."""
        member = Member.model_validate({"id": "mem1", "Name": "Alice"})
        assert member.transaction_ids == []
        assert member.change_log_ids == []

    def test_unused_member_columns_are_ignored(self):
        """Test extra spreadsheet columns do not block ingestion."""
        member = Member.model_validate({
            "id": "mem1",
            "Name": "Alice",
            "service_registered": ["svc1"],
        })
        assert member.name == "Alice"

    def test_numeric_ids_are_coerced(self):
        """Test spreadsheet numbers in id columns become strings."""
        member = Member.model_validate({"id": 7, "transaction_ids": [1, 2]})
        assert member.id == "7"
        assert member.transaction_ids == ["1", "2"]

    def test_records_are_frozen(self):
        """Test records cannot be mutated once ingested."""
        member = Member(id="mem1", name="Alice")
        with pytest.raises(ValueError):
            member.name = "Mallory"


class TestIngestion:
    """Tests for the ingestion boundary."""

    def test_ingest_snapshot(
        self, transactions_rows, services_rows, change_log_rows, members_rows,
    ):
        """Test a well-formed snapshot ingests completely."""
        snapshot = ingest_snapshot(
            transactions_rows, services_rows, change_log_rows, members_rows,
        )
        assert snapshot.counts == {
            "transactions": 4,
            "services": 2,
            "change_log": 2,
            "members": 3,
        }

    def test_missing_id_fails_fast(self):
        """Test a record without an id is rejected with its table named."""
        with pytest.raises(IngestionError) as exc_info:
            ingest_records("members", [{"Name": "Alice"}])
        assert exc_info.value.table == "members"
        assert exc_info.value.record_ref == "#0"
        assert "id" in str(exc_info.value)

    def test_non_list_link_field_fails_fast(self):
        """Test a plain string where a list of members belongs is rejected."""
        with pytest.raises(IngestionError, match="log1"):
            ingest_records("change_log", [{
                "id": "log1",
                "service": ["svc1"],
                "members": "mem1",
                "start date": "2024-01-10",
            }])

    def test_empty_member_set_fails_fast(self):
        """Test a change log entry must have at least one member."""
        with pytest.raises(IngestionError):
            ingest_records("change_log", [{
                "id": "log1",
                "service": ["svc1"],
                "members": [],
                "start date": "2024-01-10",
            }])

    def test_missing_start_date_fails_fast(self):
        """Test a change log entry without a start date is rejected."""
        with pytest.raises(IngestionError, match="start"):
            ingest_records("change_log", [{
                "id": "log1",
                "service": ["svc1"],
                "members": ["mem1"],
            }])

    def test_unparseable_date_fails_fast(self):
        """Test a start date that is not a date is rejected."""
        with pytest.raises(IngestionError, match="log1"):
            ingest_records("change_log", [{
                "id": "log1",
                "service": ["svc1"],
                "members": ["mem1"],
                "start date": "soon",
            }])

    def test_non_numeric_price_fails_fast(self):
        """Test a price that is not a number is rejected."""
        with pytest.raises(IngestionError, match="svc1"):
            ingest_records("services", [{"id": "svc1", "price": "a lot"}])

    def test_non_mapping_row_fails_fast(self):
        """Test rows must be mappings."""
        with pytest.raises(IngestionError, match="expected a mapping"):
            ingest_records("transactions", [["t1", "mem1", 100]])

    def test_table_must_be_a_list(self):
        """Test a single mapping in place of a table is rejected."""
        with pytest.raises(IngestionError, match="expected a list"):
            ingest_records("services", {"id": "svc1"})

    def test_typed_records_pass_through(self):
        """Test already-ingested records are kept as they are."""
        member = Member(id="mem1", name="Alice")
        assert ingest_records("members", [member]) == [member]

    def test_unknown_references_are_not_rejected(self):
        """Test dangling references are left for the pipeline to handle."""
        records = ingest_records("members", [{
            "id": "mem1",
            "transaction_ids": ["does-not-exist"],
        }])
        assert records[0].transaction_ids == ["does-not-exist"]

    def test_ingestion_error_is_value_error(self):
        """Test IngestionError can be caught as ValueError."""
        assert issubclass(IngestionError, ValueError)


class TestReportModels:
    """Tests for report model serialization."""

    def test_payment_info_dumps_camel_case(self):
        """Test report models serialize with camelCase keys."""
        info = PaymentInfo(
            service_name="Spotify",
            price_per_head=Decimal("75"),
            total_price_per_head=Decimal("300"),
            paid=Decimal("150"),
            credit=Credit(display="-150", number=Decimal("-150")),
            is_overdue=True,
        )
        dumped = info.model_dump(by_alias=True)
        assert dumped["serviceName"] == "Spotify"
        assert dumped["pricePerHead"] == Decimal("75")
        assert dumped["totalPricePerHead"] == Decimal("300")
        assert dumped["isOverdue"] is True
        assert dumped["availableUntil"] is None

    def test_report_round_trips_through_json(self):
        """Test a JSON dump validates back into the same model."""
        info = PaymentInfo(
            service_name="Spotify",
            price_per_head=Decimal("75"),
            total_price_per_head=Decimal("300"),
            paid=Decimal("450"),
            credit=Credit(display="+150", number=Decimal("150")),
            is_overdue=False,
        )
        restored = PaymentInfo.model_validate(
            info.model_dump(mode="json", by_alias=True)
        )
        assert restored == info


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
