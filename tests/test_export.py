"""Tests for CSV/JSON export."""

import csv
import json
from pathlib import Path

from rent_ledger.export import export_statement_csv, export_statement_json, export_valuation_json
from rent_ledger.statement import build_statement
from rent_ledger.valuation import aggregate_valuations


def test_statement_csv(tmp_path: Path, mixed_entries) -> None:
    path = tmp_path / "out" / "statement.csv"
    export_statement_csv(build_statement("lease-1", mixed_entries), path)
    with open(path, newline="") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 7
    assert rows[0]["line"] == "1"
    assert rows[0]["date"] == "2024-01-01"
    assert rows[0]["kind"] == "charge"
    assert rows[-1]["running_balance"] == "1700.00"
    assert rows[0]["balance_hint"] == ""


def test_statement_json(tmp_path: Path, mixed_entries) -> None:
    path = tmp_path / "statement.json"
    export_statement_json(build_statement("lease-1", mixed_entries), path)
    data = json.loads(path.read_text())
    assert "generated_at" in data
    assert data["current_balance"] == "1700.00"
    assert data["total_credits"] == "75.00"


def test_valuation_json(tmp_path: Path, two_estimates) -> None:
    path = tmp_path / "valuation.json"
    export_valuation_json(aggregate_valuations(two_estimates), path)
    data = json.loads(path.read_text())
    assert data["weighted_estimate"] == 354857
    assert [e["source"] for e in data["estimates"]] == ["zillow", "redfin"]
