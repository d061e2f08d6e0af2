"""Pytest fixtures."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from rent_ledger.models import EntryKind, LedgerEntry, ValuationEstimate


def make_entry(
    kind: str,
    amount: str,
    day: str,
    lease_id: str = "lease-1",
    balance_hint: str | None = None,
    reference: str = "",
    description: str = "",
) -> LedgerEntry:
    """Build a ledger entry from short string arguments."""
    return LedgerEntry(
        lease_id=lease_id,
        date=datetime.fromisoformat(day).replace(tzinfo=timezone.utc),
        kind=EntryKind(kind),
        amount=Decimal(amount),
        balance_hint=Decimal(balance_hint) if balance_hint is not None else None,
        description=description,
        reference=reference,
        source="test",
    )


@pytest.fixture
def mixed_entries() -> list[LedgerEntry]:
    """Three months of rent with a late fee, payments and a concession."""
    return [
        make_entry("charge", "1200.00", "2024-01-01", reference="C-1", description="January rent"),
        make_entry("payment", "1200.00", "2024-01-03", reference="P-1"),
        make_entry("charge", "1200.00", "2024-02-01", reference="C-2", description="February rent"),
        make_entry("charge", "75.00", "2024-02-06", reference="C-3", description="Late fee"),
        make_entry("credit", "75.00", "2024-02-10", reference="CR-1", description="Late fee waived"),
        make_entry("payment", "700.00", "2024-02-15", reference="P-2"),
        make_entry("charge", "1200.00", "2024-03-01", reference="C-4", description="March rent"),
    ]


@pytest.fixture
def doorloop_ledger() -> list[dict]:
    """Ledger lines as returned per lease (no lease field on the line)."""
    return [
        {"id": "L1", "date": "2024-01-01", "type": "LeaseCharge", "amount": 1500, "memo": "Rent", "balance": 1500},
        {"id": "L2", "createdAt": "2024-01-04T15:30:00Z", "credit": "1500.00", "memo": "Payment", "type": "LeasePayment", "balance": 0},
        {"id": "L3", "date": "2024-02-01", "debit": 1500, "memo": "Rent", "balance": 1500},
        {"id": "L4", "date": "2024-02-02", "credit": 100, "memo": "Concession", "balance": 1400},
        {"id": "L5", "date": "2024-02-05", "memo": "Missing amount"},
    ]


@pytest.fixture
def two_estimates() -> list[ValuationEstimate]:
    return [
        ValuationEstimate(source="zillow", estimate=350000, low=330000, high=370000, confidence=0.9),
        ValuationEstimate(source="redfin", estimate=360000, low=340000, high=380000, confidence=0.85),
    ]


@pytest.fixture
def entry():
    """Factory fixture for ledger entries."""
    return make_entry
