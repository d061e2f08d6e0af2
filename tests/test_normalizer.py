"""Tests for the record normalizer."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from rent_ledger.exceptions import NormalizationError
from rent_ledger.models import EntryKind
from rent_ledger.normalize import (
    RecordNormalizer,
    SourceSchema,
    AmountField,
    normalize_record,
    normalize_records,
    parse_amount,
    parse_date,
)


class TestParsing:
    """Tests for amount and date parsing."""

    def test_parse_amount_formats(self) -> None:
        assert parse_amount(1200) == Decimal("1200")
        assert parse_amount(12.5) == Decimal("12.5")
        assert parse_amount("$1,200.50") == Decimal("1200.50")
        assert parse_amount("(85.00)") == Decimal("-85.00")
        assert parse_amount("-40") == Decimal("-40")

    def test_parse_amount_rejects_non_numeric(self) -> None:
        assert parse_amount(None) is None
        assert parse_amount("") is None
        assert parse_amount("abc") is None
        assert parse_amount(True) is None
        assert parse_amount(float("nan")) is None
        assert parse_amount({"value": 1}) is None

    def test_parse_date_formats(self) -> None:
        utc = timezone.utc
        assert parse_date("2024-01-15") == datetime(2024, 1, 15, tzinfo=utc)
        assert parse_date("2024-01-15T10:30:00Z") == datetime(2024, 1, 15, 10, 30, tzinfo=utc)
        assert parse_date("01/15/2024") == datetime(2024, 1, 15, tzinfo=utc)
        assert parse_date(1704067200) == datetime(2024, 1, 1, tzinfo=utc)

    def test_parse_date_converts_offsets_to_utc(self) -> None:
        parsed = parse_date("2024-01-15T20:00:00-06:00")
        assert parsed == datetime(2024, 1, 16, 2, 0, tzinfo=timezone.utc)

    def test_parse_date_invalid(self) -> None:
        assert parse_date("not a date") is None
        assert parse_date("") is None
        assert parse_date(None) is None


class TestNormalizeRecord:
    """Tests for single-record normalization."""

    def test_missing_amount_is_an_error_not_zero(self) -> None:
        with pytest.raises(NormalizationError) as exc:
            normalize_record({"date": "2024-01-01", "leaseId": "L1"}, "generic")
        assert exc.value.field == "amount"

    def test_non_numeric_amount_falls_through_to_next_alias(self) -> None:
        entry = normalize_record(
            {"amount": "n/a", "credit": "50", "date": "2024-01-01", "leaseId": "L1"},
            "generic",
        )
        assert entry.amount == Decimal("50")
        assert entry.kind is EntryKind.CREDIT

    def test_canonical_amount_wins_over_aliases(self) -> None:
        entry = normalize_record(
            {"amount": 100, "debit": 999, "date": "2024-01-01", "leaseId": "L1"},
            "generic",
        )
        assert entry.amount == Decimal("100")

    def test_zero_amount_is_kept(self) -> None:
        entry = normalize_record({"amount": 0, "date": "2024-01-01", "leaseId": "L1"}, "generic")
        assert entry.amount == Decimal("0")

    def test_negative_amount_stored_as_magnitude(self) -> None:
        entry = normalize_record(
            {"amount": "-85", "type": "charge", "date": "2024-01-01", "leaseId": "L1"},
            "generic",
        )
        assert entry.amount == Decimal("85")
        assert entry.kind is EntryKind.CHARGE

    def test_date_falls_back_to_created_at(self) -> None:
        entry = normalize_record(
            {"amount": 10, "createdAt": "2024-03-05T12:00:00Z", "leaseId": "L1"},
            "generic",
        )
        assert entry.date == datetime(2024, 3, 5, 12, 0, tzinfo=timezone.utc)

    def test_unparsable_date_is_an_error(self) -> None:
        with pytest.raises(NormalizationError) as exc:
            normalize_record({"amount": 10, "date": "soon", "leaseId": "L1"}, "generic")
        assert exc.value.field == "date"

    def test_missing_date_is_an_error(self) -> None:
        with pytest.raises(NormalizationError):
            normalize_record({"amount": 10, "leaseId": "L1"}, "generic")

    def test_type_field_wins_over_implied_kind(self) -> None:
        entry = normalize_record(
            {"credit": 200, "type": "payment", "date": "2024-01-01", "leaseId": "L1"},
            "generic",
        )
        assert entry.kind is EntryKind.PAYMENT

    def test_kind_inferred_from_alias(self) -> None:
        debit = normalize_record({"debit": 5, "date": "2024-01-01", "leaseId": "L1"}, "generic")
        credit = normalize_record({"credit": 5, "date": "2024-01-01", "leaseId": "L1"}, "generic")
        assert debit.kind is EntryKind.CHARGE
        assert credit.kind is EntryKind.CREDIT

    def test_ambiguous_record_defaults_to_charge(self) -> None:
        entry = normalize_record(
            {"amount": 5, "type": "mystery", "date": "2024-01-01", "leaseId": "L1"},
            "generic",
        )
        assert entry.kind is EntryKind.CHARGE

    def test_lease_from_record_or_argument(self) -> None:
        on_record = normalize_record({"amount": 1, "date": "2024-01-01", "lease": "A"}, "generic", lease_id="B")
        supplied = normalize_record({"amount": 1, "date": "2024-01-01"}, "generic", lease_id="B")
        assert on_record.lease_id == "A"
        assert supplied.lease_id == "B"

    def test_missing_lease_is_an_error(self) -> None:
        with pytest.raises(NormalizationError):
            normalize_record({"amount": 1, "date": "2024-01-01"}, "generic")

    def test_unknown_source(self) -> None:
        with pytest.raises(NormalizationError, match="Unknown source"):
            normalize_record({"amount": 1, "date": "2024-01-01"}, "nope", lease_id="L1")

    def test_provenance_fields(self) -> None:
        entry = normalize_record(
            {"amount": 1, "date": "2024-01-01", "memo": "Parking", "id": "X9", "balance": "1.00"},
            "doorloop",
            lease_id="L1",
        )
        assert entry.description == "Parking"
        assert entry.reference == "X9"
        assert entry.source == "doorloop"
        assert entry.balance_hint == Decimal("1.00")


class TestSourceSchemas:
    """Tests for the built-in per-source alias tables."""

    def test_stripe_minor_units_and_epoch(self) -> None:
        entry = normalize_record(
            {"id": "ch_1", "amount": 120050, "created": 1704067200, "metadata": {"lease_id": "L7"}},
            "stripe",
        )
        assert entry.amount == Decimal("1200.50")
        assert entry.kind is EntryKind.PAYMENT
        assert entry.lease_id == "L7"
        assert entry.reference == "ch_1"
        assert entry.date == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_doorloop_payment_amount_order(self) -> None:
        entry = normalize_record(
            {"amountReceived": None, "amount": 900, "amountAppliedToCharges": 850, "date": "2024-01-02"},
            "doorloop_payment",
            lease_id="L1",
        )
        assert entry.amount == Decimal("900")
        assert entry.kind is EntryKind.PAYMENT

    def test_doorloop_charge_and_credit(self) -> None:
        charge = normalize_record({"totalAmount": 1500, "date": "2024-01-01"}, "doorloop_charge", lease_id="L1")
        credit = normalize_record({"totalAmount": 50, "date": "2024-01-01"}, "doorloop_credit", lease_id="L1")
        assert charge.kind is EntryKind.CHARGE
        assert credit.kind is EntryKind.CREDIT

    def test_turbotenant_skips_zero_debit_column(self) -> None:
        entry = normalize_record(
            {"Date": "01/20/2024", "Description": "Refund", "Debit": "0.00", "Credit": "$150.00", "Lease": "L1"},
            "turbotenant",
        )
        assert entry.amount == Decimal("150.00")
        assert entry.kind is EntryKind.CREDIT

    def test_custom_schema(self) -> None:
        schema = SourceSchema(
            name="bank",
            amount_fields=(AmountField("value", EntryKind.PAYMENT),),
            date_fields=("posted",),
            lease_fields=("account",),
        )
        entry = normalize_record(
            {"value": "10", "posted": "2024-05-01", "account": "A1"},
            "bank",
            schemas={"bank": schema},
        )
        assert entry.kind is EntryKind.PAYMENT
        assert entry.lease_id == "A1"


class TestNormalizeMany:
    """Tests for batch normalization."""

    def test_bad_records_are_collected(self, doorloop_ledger: list[dict]) -> None:
        result = RecordNormalizer().normalize_many(doorloop_ledger, "doorloop", lease_id="lease-9")
        assert len(result.entries) == 4
        assert len(result.errors) == 1
        assert result.errors[0].index == 4
        assert "amount" in result.errors[0].message
        assert not result.ok

    def test_kinds_from_doorloop_ledger(self, doorloop_ledger: list[dict]) -> None:
        result = normalize_records(doorloop_ledger, "doorloop", lease_id="lease-9")
        kinds = [e.kind for e in result.entries]
        assert kinds == [EntryKind.CHARGE, EntryKind.PAYMENT, EntryKind.CHARGE, EntryKind.CREDIT]
        assert all(e.lease_id == "lease-9" for e in result.entries)

    def test_non_mapping_record_is_collected(self) -> None:
        result = normalize_records([["not", "a", "dict"]], "generic", lease_id="L1")  # type: ignore[list-item]
        assert result.entries == []
        assert len(result.errors) == 1
        assert result.errors[0].record == {}

    def test_unknown_source_raises_for_batch(self) -> None:
        with pytest.raises(NormalizationError):
            normalize_records([{"amount": 1}], "nope")

    def test_sources_lists_registry(self) -> None:
        normalizer = RecordNormalizer()
        assert "generic" in normalizer.sources
        assert "stripe" in normalizer.sources
        assert normalizer.sources == sorted(normalizer.sources)
