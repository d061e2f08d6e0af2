"""Exceptions raised by the ledger and valuation core."""

from __future__ import annotations


class RentLedgerError(Exception):
    """Base exception for rent-ledger errors."""


class NormalizationError(RentLedgerError):
    """Raised when a raw record has no usable amount, date or lease."""

    def __init__(self, source: str, message: str, field: str | None = None) -> None:
        self.source = source
        self.message = message
        self.field = field
        super().__init__(f"[{source}] {message}")


class LeaseMismatchError(RentLedgerError):
    """Raised when an entry is handed to a statement for a different lease."""

    def __init__(self, expected: str, actual: str, reference: str = "") -> None:
        self.expected = expected
        self.actual = actual
        self.reference = reference
        ref = f" (ref {reference})" if reference else ""
        super().__init__(
            f"Entry{ref} belongs to lease {actual!r}, not {expected!r}"
        )


class ConfigError(RentLedgerError):
    """Raised when configuration is malformed."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Config error: {message}")
