"""Configuration loader."""

from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigError
from .models import EntryKind, ProviderParams, StatementParams, ValuationParams
from .normalize.schemas import BUILTIN_SCHEMAS, AmountField, SourceSchema


def load_config(config_path: Path | str | None = None) -> dict[str, Any]:
    """Load config from YAML file."""
    path = Path(config_path) if config_path else Path(__file__).parent.parent.parent / "config.yaml"
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _number(value: Any, where: str) -> float:
    try:
        num = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{where} is not a number: {value!r}") from None
    if not math.isfinite(num):
        raise ConfigError(f"{where} must be finite")
    return num


def get_statement_params(config: dict[str, Any]) -> StatementParams:
    """Extract statement params from config."""
    st = config.get("statement", {}) or {}
    raw = st.get("balance_tolerance", "0")
    try:
        tolerance = Decimal(str(raw))
    except InvalidOperation:
        raise ConfigError(f"statement.balance_tolerance is not a number: {raw!r}") from None
    if not tolerance.is_finite():
        raise ConfigError("statement.balance_tolerance must be finite")
    if tolerance < 0:
        raise ConfigError("statement.balance_tolerance must be >= 0")
    return StatementParams(balance_tolerance=tolerance)


def get_valuation_params(config: dict[str, Any]) -> ValuationParams:
    """Extract valuation confidence defaults from config."""
    val = config.get("valuation", {}) or {}
    overrides = val.get("confidence", {}) or {}
    if not isinstance(overrides, dict):
        raise ConfigError("valuation.confidence must be a mapping of source to confidence")
    return ValuationParams(
        default_confidence=_number(val.get("default_confidence", 0.70), "valuation.default_confidence"),
        confidence={
            str(k).lower(): _number(v, f"valuation.confidence.{k}") for k, v in overrides.items()
        },
    )


def get_provider_params(config: dict[str, Any]) -> ProviderParams:
    """Extract provider HTTP settings from config."""
    pv = config.get("providers", {}) or {}
    timeout = _number(pv.get("timeout_seconds", 30), "providers.timeout_seconds")
    if timeout <= 0:
        raise ConfigError("providers.timeout_seconds must be > 0")
    return ProviderParams(timeout_seconds=timeout)


def _parse_kind(value: Any, where: str) -> EntryKind:
    try:
        return EntryKind(str(value).strip().lower())
    except ValueError:
        raise ConfigError(f"{where}: unknown kind {value!r}") from None


def _str_tuple(value: Any, where: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{where} must be a list of field names")
    return tuple(value)


def _amount_fields(value: Any, where: str) -> tuple[AmountField, ...]:
    """Amount aliases: plain field names (neutral) or {path, kind, skip_zero} maps."""
    if not isinstance(value, list) or not value:
        raise ConfigError(f"{where} must be a non-empty list")
    fields: list[AmountField] = []
    for item in value:
        if isinstance(item, str):
            fields.append(AmountField(item))
        elif isinstance(item, dict) and isinstance(item.get("path"), str):
            kind = _parse_kind(item["kind"], where) if item.get("kind") else None
            fields.append(AmountField(item["path"], kind, bool(item.get("skip_zero", False))))
        else:
            raise ConfigError(f"{where}: invalid amount field {item!r}")
    return tuple(fields)


def _build_schema(name: str, spec: dict[str, Any]) -> SourceSchema:
    where = f"sources.{name}"
    if not isinstance(spec, dict):
        raise ConfigError(f"{where} must be a mapping")
    date_fields = _str_tuple(spec.get("date_fields"), f"{where}.date_fields")
    if not date_fields:
        raise ConfigError(f"{where}.date_fields is required")

    kwargs: dict[str, Any] = {
        "name": name,
        "amount_fields": _amount_fields(spec.get("amount_fields"), f"{where}.amount_fields"),
        "date_fields": date_fields,
    }
    for key in ("type_fields", "lease_fields", "description_fields", "reference_fields", "balance_fields"):
        if key in spec:
            kwargs[key] = _str_tuple(spec[key], f"{where}.{key}")
    if "amount_scale" in spec:
        try:
            scale = Decimal(str(spec["amount_scale"]))
        except InvalidOperation:
            raise ConfigError(f"{where}.amount_scale is not a number") from None
        if scale <= 0:
            raise ConfigError(f"{where}.amount_scale must be > 0")
        kwargs["amount_scale"] = scale
    if "default_kind" in spec:
        kwargs["default_kind"] = _parse_kind(spec["default_kind"], f"{where}.default_kind")
    return SourceSchema(**kwargs)


def get_source_schemas(config: dict[str, Any]) -> dict[str, SourceSchema]:
    """Built-in source schemas merged with those declared under ``sources``.

    A declared source with a built-in name replaces the built-in.
    """
    schemas = dict(BUILTIN_SCHEMAS)
    for name, spec in (config.get("sources", {}) or {}).items():
        schemas[str(name)] = _build_schema(str(name), spec)
    return schemas
