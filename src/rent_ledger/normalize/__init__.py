"""Record normalization: upstream ledger records to canonical entries."""

from .normalizer import RecordNormalizer, normalize_record, normalize_records
from .parsing import parse_amount, parse_date
from .schemas import BUILTIN_SCHEMAS, AmountField, SourceSchema, get_schema, kind_from_type

__all__ = [
    "RecordNormalizer",
    "normalize_record",
    "normalize_records",
    "parse_amount",
    "parse_date",
    "BUILTIN_SCHEMAS",
    "AmountField",
    "SourceSchema",
    "get_schema",
    "kind_from_type",
]
