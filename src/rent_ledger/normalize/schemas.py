"""Ordered field-alias tables for each upstream record source.

Every source declares, in priority order, which fields may carry the amount,
date, type, lease and provenance of a ledger line. Amount fields may imply a
kind (a populated ``credit`` column means a credit). The normalizer walks
these tables deterministically; nothing is guessed from field presence
outside of what is declared here.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..exceptions import NormalizationError
from ..models import EntryKind


@dataclass(frozen=True)
class AmountField:
    """Amount alias. ``implied_kind`` is None for neutral fields.

    ``skip_zero`` treats an explicit zero as absent, for paired debit/credit
    columns where the unused column is filled with 0.
    """

    path: str
    implied_kind: EntryKind | None = None
    skip_zero: bool = False


@dataclass(frozen=True)
class SourceSchema:
    """Alias table for one upstream source."""

    name: str
    amount_fields: tuple[AmountField, ...]
    date_fields: tuple[str, ...]
    type_fields: tuple[str, ...] = ()
    lease_fields: tuple[str, ...] = ("leaseId", "lease_id", "lease")
    description_fields: tuple[str, ...] = ("description", "memo")
    reference_fields: tuple[str, ...] = ("reference", "id")
    balance_fields: tuple[str, ...] = ()
    amount_scale: Decimal = Decimal("1")
    default_kind: EntryKind = EntryKind.CHARGE


# Upstream type/category values -> kind (keys lowercased, spaces/dashes -> "_")
TYPE_ALIASES: dict[str, EntryKind] = {
    "charge": EntryKind.CHARGE,
    "lease_charge": EntryKind.CHARGE,
    "leasecharge": EntryKind.CHARGE,
    "rent": EntryKind.CHARGE,
    "fee": EntryKind.CHARGE,
    "late_fee": EntryKind.CHARGE,
    "invoice": EntryKind.CHARGE,
    "debit": EntryKind.CHARGE,
    "payment": EntryKind.PAYMENT,
    "lease_payment": EntryKind.PAYMENT,
    "leasepayment": EntryKind.PAYMENT,
    "rent_payment": EntryKind.PAYMENT,
    "receipt": EntryKind.PAYMENT,
    "credit": EntryKind.CREDIT,
    "lease_credit": EntryKind.CREDIT,
    "leasecredit": EntryKind.CREDIT,
    "concession": EntryKind.CREDIT,
    "refund": EntryKind.CREDIT,
}


def kind_from_type(value: object) -> EntryKind | None:
    """Map an upstream type/category value to a kind; None if unrecognized."""
    if not isinstance(value, str):
        return None
    key = value.strip().lower().replace(" ", "_").replace("-", "_")
    return TYPE_ALIASES.get(key)


_CHARGE = EntryKind.CHARGE
_PAYMENT = EntryKind.PAYMENT
_CREDIT = EntryKind.CREDIT

BUILTIN_SCHEMAS: dict[str, SourceSchema] = {
    schema.name: schema
    for schema in (
        SourceSchema(
            name="generic",
            amount_fields=(
                AmountField("amount"),
                AmountField("debit", _CHARGE),
                AmountField("credit", _CREDIT),
            ),
            date_fields=("date", "createdAt", "created_at"),
            type_fields=("type", "kind", "category"),
            balance_fields=("balance", "runningBalance"),
        ),
        # Lease ledger lines
        SourceSchema(
            name="doorloop",
            amount_fields=(
                AmountField("amount"),
                AmountField("debit", _CHARGE),
                AmountField("credit", _CREDIT),
            ),
            date_fields=("date", "createdAt"),
            type_fields=("type",),
            balance_fields=("balance", "runningBalance"),
        ),
        SourceSchema(
            name="doorloop_charge",
            amount_fields=(
                AmountField("totalAmount", _CHARGE),
                AmountField("amount", _CHARGE),
            ),
            date_fields=("date", "createdAt"),
            default_kind=_CHARGE,
        ),
        SourceSchema(
            name="doorloop_payment",
            amount_fields=(
                AmountField("amountReceived", _PAYMENT),
                AmountField("amount", _PAYMENT),
                AmountField("amountAppliedToCharges", _PAYMENT),
            ),
            date_fields=("date", "createdAt"),
            reference_fields=("reference", "id"),
            default_kind=_PAYMENT,
        ),
        SourceSchema(
            name="doorloop_credit",
            amount_fields=(
                AmountField("totalAmount", _CREDIT),
                AmountField("amount", _CREDIT),
            ),
            date_fields=("date", "createdAt"),
            default_kind=_CREDIT,
        ),
        # Spreadsheet export columns
        SourceSchema(
            name="turbotenant",
            amount_fields=(
                AmountField("Debit", _CHARGE, skip_zero=True),
                AmountField("Credit", _CREDIT, skip_zero=True),
                AmountField("Amount"),
            ),
            date_fields=("Date", "date"),
            type_fields=("Type", "Category", "category"),
            lease_fields=("Lease", "lease_id", "leaseId"),
            description_fields=("Description", "description", "Notes"),
            reference_fields=("Reference", "reference"),
            balance_fields=("Balance", "balance"),
        ),
        # Charges in minor units, epoch-second timestamps
        SourceSchema(
            name="stripe",
            amount_fields=(AmountField("amount", _PAYMENT),),
            date_fields=("created",),
            lease_fields=("metadata.lease_id", "metadata.leaseId"),
            description_fields=("description", "statement_descriptor"),
            reference_fields=("id",),
            amount_scale=Decimal("100"),
            default_kind=_PAYMENT,
        ),
    )
}


def get_schema(source: str, schemas: dict[str, SourceSchema] | None = None) -> SourceSchema:
    """Return the alias table for a source tag."""
    registry = BUILTIN_SCHEMAS if schemas is None else schemas
    schema = registry.get(source)
    if schema is None:
        known = ", ".join(sorted(registry))
        raise NormalizationError(source, f"Unknown source (known: {known})")
    return schema
