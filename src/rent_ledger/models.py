"""Data models for ledger entries, statements and valuations."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

CENTS = Decimal("0.01")


def _money(value: Decimal) -> str:
    """Render a ledger amount with two decimal places."""
    return str(value.quantize(CENTS))


class EntryKind(str, Enum):
    """Kind of a ledger entry. The sign of an amount is implied by its kind."""

    CHARGE = "charge"
    PAYMENT = "payment"
    CREDIT = "credit"

    @property
    def sign(self) -> int:
        return 1 if self is EntryKind.CHARGE else -1


class StatementStatus(str, Enum):
    PAID = "paid"
    OVERDUE = "overdue"


@dataclass(frozen=True)
class LedgerEntry:
    """Canonical ledger entry (source-agnostic)."""

    lease_id: str
    date: datetime
    kind: EntryKind
    amount: Decimal
    balance_hint: Decimal | None = None
    description: str = ""
    reference: str = ""
    source: str = ""

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError(f"amount must be non-negative, got {self.amount}")

    @property
    def signed_amount(self) -> Decimal:
        """Amount with the sign implied by kind (charges positive)."""
        return self.amount * self.kind.sign

    @property
    def fingerprint(self) -> str:
        """Stable digest of date, amount and description for import dedup."""
        key = f"{self.date.isoformat()}|{_money(self.amount)}|{self.description}"
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()[:16]
        return f"{self.source or 'entry'}-{digest}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "lease_id": self.lease_id,
            "date": self.date.isoformat(),
            "kind": self.kind.value,
            "amount": _money(self.amount),
            "balance_hint": _money(self.balance_hint) if self.balance_hint is not None else None,
            "description": self.description,
            "reference": self.reference,
            "source": self.source,
        }


@dataclass(frozen=True)
class StatementLine:
    """One statement row: an entry and the running balance after it."""

    entry: LedgerEntry
    running_balance: Decimal

    def to_dict(self) -> dict[str, Any]:
        d = self.entry.to_dict()
        d["running_balance"] = _money(self.running_balance)
        return d


@dataclass(frozen=True)
class BalanceDiscrepancy:
    """Upstream-reported balance that disagrees with the computed one."""

    index: int
    reference: str
    date: datetime
    reported: Decimal
    computed: Decimal

    @property
    def difference(self) -> Decimal:
        return self.reported - self.computed

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "reference": self.reference,
            "date": self.date.isoformat(),
            "reported": _money(self.reported),
            "computed": _money(self.computed),
            "difference": _money(self.difference),
        }


@dataclass(frozen=True)
class Statement:
    """Tenant statement for one lease, ordered by date with running balance."""

    lease_id: str
    lines: tuple[StatementLine, ...]
    total_charges: Decimal
    total_payments: Decimal
    total_credits: Decimal
    discrepancies: tuple[BalanceDiscrepancy, ...] = ()

    @property
    def current_balance(self) -> Decimal:
        return self.total_charges - self.total_payments - self.total_credits

    @property
    def running_balances(self) -> list[Decimal]:
        return [line.running_balance for line in self.lines]

    @property
    def is_reconciled(self) -> bool:
        """True when the totals agree with the last running balance."""
        last = self.lines[-1].running_balance if self.lines else Decimal("0")
        return self.current_balance == last

    @property
    def status(self) -> StatementStatus:
        return StatementStatus.PAID if self.current_balance <= 0 else StatementStatus.OVERDUE

    @property
    def amount_due(self) -> Decimal:
        return max(self.current_balance, Decimal("0"))

    @property
    def credit_balance(self) -> Decimal:
        """Amount paid in advance of charges (zero when something is owed)."""
        return max(-self.current_balance, Decimal("0"))

    @property
    def period_start(self) -> datetime | None:
        return self.lines[0].entry.date if self.lines else None

    @property
    def period_end(self) -> datetime | None:
        return self.lines[-1].entry.date if self.lines else None

    def lines_of_kind(self, kind: EntryKind) -> list[StatementLine]:
        """Lines of a single kind, in statement order."""
        return [line for line in self.lines if line.entry.kind is kind]

    def to_dict(self) -> dict[str, Any]:
        return {
            "lease_id": self.lease_id,
            "period_start": self.period_start.isoformat() if self.period_start else None,
            "period_end": self.period_end.isoformat() if self.period_end else None,
            "lines": [line.to_dict() for line in self.lines],
            "total_charges": _money(self.total_charges),
            "total_payments": _money(self.total_payments),
            "total_credits": _money(self.total_credits),
            "current_balance": _money(self.current_balance),
            "amount_due": _money(self.amount_due),
            "credit_balance": _money(self.credit_balance),
            "status": self.status.value,
            "discrepancies": [d.to_dict() for d in self.discrepancies],
        }


@dataclass
class RecordError:
    """A raw record the normalizer rejected."""

    index: int
    source: str
    message: str
    record: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"index": self.index, "source": self.source, "message": self.message}


@dataclass
class NormalizationResult:
    """Entries normalized from a batch plus the records that were rejected."""

    entries: list[LedgerEntry] = field(default_factory=list)
    errors: list[RecordError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class ValuationEstimate:
    """Single provider's estimate of a property's value."""

    source: str
    estimate: float
    low: float
    high: float
    confidence: float
    rental_estimate: float | None = None
    details: dict[str, Any] = field(default_factory=dict)
    fetched_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "estimate": self.estimate,
            "low": self.low,
            "high": self.high,
            "confidence": self.confidence,
            "rental_estimate": self.rental_estimate,
            "details": self.details,
            "fetched_at": self.fetched_at.isoformat() if self.fetched_at else None,
        }


@dataclass(frozen=True)
class AggregateValuation:
    """Composite valuation from one or more provider estimates."""

    weighted_estimate: float
    low: float
    high: float
    sources: int
    estimates: tuple[ValuationEstimate, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "weighted_estimate": self.weighted_estimate,
            "low": self.low,
            "high": self.high,
            "sources": self.sources,
            "estimates": [e.to_dict() for e in self.estimates],
        }


@dataclass
class StatementParams:
    """Statement builder parameters."""

    balance_tolerance: Decimal = Decimal("0")


@dataclass
class ValuationParams:
    """Confidence defaults for estimates that carry none."""

    default_confidence: float = 0.70
    confidence: dict[str, float] = field(default_factory=dict)


@dataclass
class ProviderParams:
    """HTTP settings for valuation providers."""

    timeout_seconds: float = 30.0
