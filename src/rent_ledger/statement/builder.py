"""Statement builder: chronological running balance for one lease."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable

from ..exceptions import LeaseMismatchError
from ..models import (
    BalanceDiscrepancy,
    EntryKind,
    LedgerEntry,
    Statement,
    StatementLine,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def build_statement(
    lease_id: str,
    entries: Iterable[LedgerEntry],
    tolerance: Decimal = ZERO,
) -> Statement:
    """Build the statement for ``lease_id`` from its ledger entries.

    Entries are ordered by date; entries sharing a timestamp keep their input
    order. Every entry must belong to ``lease_id`` (LeaseMismatchError
    otherwise). Upstream balance hints that differ from the computed running
    balance by more than ``tolerance`` are attached as discrepancies.
    """
    entries = list(entries)
    for entry in entries:
        if entry.lease_id != lease_id:
            raise LeaseMismatchError(lease_id, entry.lease_id, entry.reference)

    # sorted() is stable, so equal dates keep input order
    ordered = sorted(entries, key=lambda e: e.date)

    totals = {kind: ZERO for kind in EntryKind}
    balance = ZERO
    lines: list[StatementLine] = []
    discrepancies: list[BalanceDiscrepancy] = []

    for i, entry in enumerate(ordered):
        totals[entry.kind] += entry.amount
        balance += entry.signed_amount
        lines.append(StatementLine(entry=entry, running_balance=balance))

        if entry.balance_hint is not None and abs(entry.balance_hint - balance) > tolerance:
            discrepancies.append(
                BalanceDiscrepancy(
                    index=i,
                    reference=entry.reference,
                    date=entry.date,
                    reported=entry.balance_hint,
                    computed=balance,
                )
            )
            logger.warning(
                "Lease %s: upstream balance %s != computed %s at %s (%s)",
                lease_id,
                entry.balance_hint,
                balance,
                entry.date.date().isoformat(),
                entry.reference or entry.description or f"line {i}",
            )

    statement = Statement(
        lease_id=lease_id,
        lines=tuple(lines),
        total_charges=totals[EntryKind.CHARGE],
        total_payments=totals[EntryKind.PAYMENT],
        total_credits=totals[EntryKind.CREDIT],
        discrepancies=tuple(discrepancies),
    )
    logger.debug(
        "Lease %s: %d lines, balance %s (%s)",
        lease_id,
        len(lines),
        statement.current_balance,
        statement.status.value,
    )
    return statement


def build_statements(
    entries: Iterable[LedgerEntry],
    tolerance: Decimal = ZERO,
) -> dict[str, Statement]:
    """Group entries by lease and build one statement per lease.

    Leases appear in order of their first entry.
    """
    by_lease: dict[str, list[LedgerEntry]] = {}
    for entry in entries:
        by_lease.setdefault(entry.lease_id, []).append(entry)
    return {
        lease_id: build_statement(lease_id, lease_entries, tolerance=tolerance)
        for lease_id, lease_entries in by_lease.items()
    }


class StatementBuilder:
    """Builds statements with a fixed balance-hint tolerance."""

    def __init__(self, tolerance: Decimal = ZERO) -> None:
        self.tolerance = tolerance

    def build(self, lease_id: str, entries: Iterable[LedgerEntry]) -> Statement:
        return build_statement(lease_id, entries, tolerance=self.tolerance)

    def build_many(self, entries: Iterable[LedgerEntry]) -> dict[str, Statement]:
        return build_statements(entries, tolerance=self.tolerance)
