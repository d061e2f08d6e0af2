"""Lease ledger reconciliation and property valuation aggregation."""

from .exceptions import ConfigError, LeaseMismatchError, NormalizationError, RentLedgerError
from .models import (
    AggregateValuation,
    BalanceDiscrepancy,
    EntryKind,
    LedgerEntry,
    NormalizationResult,
    RecordError,
    Statement,
    StatementLine,
    StatementStatus,
    ValuationEstimate,
)
from .normalize import RecordNormalizer, normalize_record, normalize_records
from .statement import StatementBuilder, build_statement, build_statements
from .valuation import aggregate_valuations

__all__ = [
    "ConfigError",
    "LeaseMismatchError",
    "NormalizationError",
    "RentLedgerError",
    "AggregateValuation",
    "BalanceDiscrepancy",
    "EntryKind",
    "LedgerEntry",
    "NormalizationResult",
    "RecordError",
    "Statement",
    "StatementLine",
    "StatementStatus",
    "ValuationEstimate",
    "RecordNormalizer",
    "normalize_record",
    "normalize_records",
    "StatementBuilder",
    "build_statement",
    "build_statements",
    "aggregate_valuations",
]
