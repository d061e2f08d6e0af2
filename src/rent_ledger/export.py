"""Export statements and valuations to CSV and JSON."""

from __future__ import annotations

import csv
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .models import AggregateValuation, Statement


def _write_json(data: dict[str, Any], path: Path | str) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_statement_csv(statement: Statement, path: Path | str) -> None:
    """Export statement lines with running balance to CSV."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fieldnames = [
        "line",
        "date",
        "kind",
        "description",
        "reference",
        "amount",
        "running_balance",
        "balance_hint",
        "source",
    ]

    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for i, line in enumerate(statement.lines, 1):
            row = line.to_dict()
            writer.writerow({
                "line": i,
                "date": line.entry.date.date().isoformat(),
                "kind": row["kind"],
                "description": row["description"],
                "reference": row["reference"],
                "amount": row["amount"],
                "running_balance": row["running_balance"],
                "balance_hint": row["balance_hint"] or "",
                "source": row["source"],
            })


def export_statement_json(statement: Statement, path: Path | str) -> None:
    """Export the full statement (lines, totals, discrepancies) to JSON."""
    data = {"generated_at": datetime.now(timezone.utc).isoformat(), **statement.to_dict()}
    _write_json(data, path)


def export_valuation_json(valuation: AggregateValuation, path: Path | str) -> None:
    """Export an aggregate valuation with its per-source estimates to JSON."""
    data = {"generated_at": datetime.now(timezone.utc).isoformat(), **valuation.to_dict()}
    _write_json(data, path)
