"""Record normalizer: raw upstream records -> canonical ledger entries."""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable, Mapping

from ..exceptions import NormalizationError
from ..models import EntryKind, LedgerEntry, NormalizationResult, RecordError
from .parsing import get_field, is_blank, parse_amount, parse_date
from .schemas import BUILTIN_SCHEMAS, AmountField, SourceSchema, get_schema, kind_from_type

logger = logging.getLogger(__name__)


def _first_text(record: Mapping[str, Any], paths: tuple[str, ...]) -> str:
    for path in paths:
        value = get_field(record, path)
        if not is_blank(value):
            return str(value).strip()
    return ""


def _resolve_amount(
    record: Mapping[str, Any], schema: SourceSchema
) -> tuple[Decimal, AmountField]:
    """First non-null numeric amount alias wins. Missing amount is an error."""
    for alias in schema.amount_fields:
        value = parse_amount(get_field(record, alias.path))
        if value is None:
            continue
        if alias.skip_zero and value == 0:
            continue
        return abs(value) / schema.amount_scale, alias
    fields = ", ".join(a.path for a in schema.amount_fields)
    raise NormalizationError(schema.name, f"No usable amount (tried {fields})", field="amount")


def _resolve_date(record: Mapping[str, Any], schema: SourceSchema) -> datetime:
    for path in schema.date_fields:
        raw = get_field(record, path)
        if is_blank(raw):
            continue
        parsed = parse_date(raw)
        if parsed is None:
            raise NormalizationError(schema.name, f"Unparsable date in {path!r}: {raw!r}", field="date")
        return parsed
    fields = ", ".join(schema.date_fields)
    raise NormalizationError(schema.name, f"No date (tried {fields})", field="date")


def _resolve_kind(
    record: Mapping[str, Any], schema: SourceSchema, amount_alias: AmountField
) -> EntryKind:
    """Explicit type field, then the kind implied by the amount alias, then the default."""
    for path in schema.type_fields:
        kind = kind_from_type(get_field(record, path))
        if kind is not None:
            return kind
    if amount_alias.implied_kind is not None:
        return amount_alias.implied_kind
    return schema.default_kind


def _resolve_balance(record: Mapping[str, Any], schema: SourceSchema) -> Decimal | None:
    for path in schema.balance_fields:
        value = parse_amount(get_field(record, path))
        if value is not None:
            return value / schema.amount_scale
    return None


def normalize_record(
    record: Mapping[str, Any],
    source: str,
    lease_id: str | None = None,
    schemas: dict[str, SourceSchema] | None = None,
) -> LedgerEntry:
    """Normalize one raw record into a LedgerEntry.

    ``lease_id`` is used when the record itself does not name its lease
    (e.g. ledger lines fetched per lease). Raises NormalizationError when no
    usable amount, date or lease can be found.
    """
    schema = get_schema(source, schemas)
    if not isinstance(record, Mapping):
        raise NormalizationError(source, f"Record is not a mapping: {type(record).__name__}")

    amount, alias = _resolve_amount(record, schema)
    when = _resolve_date(record, schema)
    kind = _resolve_kind(record, schema, alias)

    lease = _first_text(record, schema.lease_fields) or (lease_id or "")
    if not lease:
        raise NormalizationError(source, "No lease id on record and none supplied", field="lease_id")

    return LedgerEntry(
        lease_id=lease,
        date=when,
        kind=kind,
        amount=amount,
        balance_hint=_resolve_balance(record, schema),
        description=_first_text(record, schema.description_fields),
        reference=_first_text(record, schema.reference_fields),
        source=source,
    )


class RecordNormalizer:
    """Normalizes batches of raw records against an explicit schema registry."""

    def __init__(self, schemas: dict[str, SourceSchema] | None = None) -> None:
        self.schemas = dict(schemas) if schemas is not None else dict(BUILTIN_SCHEMAS)

    @property
    def sources(self) -> list[str]:
        return sorted(self.schemas)

    def normalize(
        self,
        record: Mapping[str, Any],
        source: str,
        lease_id: str | None = None,
    ) -> LedgerEntry:
        """Normalize a single record (raises NormalizationError)."""
        return normalize_record(record, source, lease_id=lease_id, schemas=self.schemas)

    def normalize_many(
        self,
        records: Iterable[Mapping[str, Any]],
        source: str,
        lease_id: str | None = None,
    ) -> NormalizationResult:
        """Normalize a batch, collecting per-record failures instead of raising."""
        get_schema(source, self.schemas)
        result = NormalizationResult()
        for i, record in enumerate(records):
            try:
                result.entries.append(self.normalize(record, source, lease_id=lease_id))
            except NormalizationError as e:
                logger.debug("Rejected %s record %d: %s", source, i, e.message)
                result.errors.append(
                    RecordError(
                        index=i,
                        source=source,
                        message=e.message,
                        record=dict(record) if isinstance(record, Mapping) else {},
                    )
                )
        logger.info(
            "Normalized %d %s records (%d rejected)",
            len(result.entries),
            source,
            len(result.errors),
        )
        return result


def normalize_records(
    records: Iterable[Mapping[str, Any]],
    source: str,
    lease_id: str | None = None,
    schemas: dict[str, SourceSchema] | None = None,
) -> NormalizationResult:
    """Normalize a batch of records with the given (or built-in) schemas."""
    return RecordNormalizer(schemas).normalize_many(records, source, lease_id=lease_id)
