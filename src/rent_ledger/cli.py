"""CLI for rent-ledger tenant statements and property valuations."""

from __future__ import annotations

import csv
import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

import httpx
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import (
    get_provider_params,
    get_source_schemas,
    get_statement_params,
    get_valuation_params,
    load_config,
)
from .exceptions import ConfigError, LeaseMismatchError
from .export import export_statement_csv, export_statement_json, export_valuation_json
from .models import AggregateValuation, EntryKind, Statement, ValuationEstimate
from .normalize import RecordNormalizer
from .statement import StatementBuilder
from .valuation import (
    ALL_PROVIDERS,
    VALUATION_SOURCES,
    aggregate_valuations,
    default_confidence,
    fetch_all_estimates,
    get_available_providers,
)

app = typer.Typer(
    name="rent-ledger",
    help="Tenant statements with verified running balances, and composite property valuations",
)
console = Console()


def _money(value: Any) -> str:
    return f"-${-value:,.2f}" if value < 0 else f"${value:,.2f}"


def _load_cfg(config_path: Optional[Path]) -> dict[str, Any]:
    """Load config; the default config file is optional, an explicit one is not."""
    try:
        return load_config(config_path)
    except FileNotFoundError as e:
        if config_path:
            console.print(f"[red]{escape(str(e))}[/red]")
            raise typer.Exit(1)
        return {}


def _load_records(path: Path) -> list[dict[str, Any]]:
    """Read raw records from a CSV file or a JSON array (or {"data": [...]})."""
    if not path.exists():
        console.print(f"[red]File not found: {path}[/red]")
        raise typer.Exit(1)
    if path.suffix.lower() == ".csv":
        with open(path, newline="", encoding="utf-8-sig") as f:
            return [dict(row) for row in csv.DictReader(f)]
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        console.print(f"[red]Invalid JSON in {path}: {e}[/red]")
        raise typer.Exit(1)
    if isinstance(data, dict):
        data = data.get("data") or data.get("records") or []
    if not isinstance(data, list):
        console.print(f"[red]Expected a list of records in {path}[/red]")
        raise typer.Exit(1)
    return [r for r in data if isinstance(r, dict)]


def _export_path(path: Path, lease_id: str) -> Path:
    """Per-lease export file: ``out/statement.csv`` -> ``out/statement-<lease>.csv``."""
    safe = re.sub(r"[^\w.-]+", "_", lease_id)
    return path.with_name(f"{path.stem}-{safe}{path.suffix}")


def _opt_float(row: dict[str, Any], key: str) -> float | None:
    """Numeric field of an estimate row; None when absent or blank."""
    value = row.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return float(value)


def _display_statement(statement: Statement) -> None:
    """Display statement lines and account summary."""
    table = Table(title=f"Statement - Lease {statement.lease_id}")
    table.add_column("Date", style="dim")
    table.add_column("Kind")
    table.add_column("Description", style="cyan")
    table.add_column("Reference", style="dim")
    table.add_column("Amount", justify="right")
    table.add_column("Balance", justify="right")

    kind_style = {EntryKind.CHARGE: "red", EntryKind.PAYMENT: "green", EntryKind.CREDIT: "blue"}
    for line in statement.lines:
        e = line.entry
        desc = e.description[:34] + "..." if len(e.description) > 34 else e.description
        table.add_row(
            e.date.date().isoformat(),
            f"[{kind_style[e.kind]}]{e.kind.value}[/{kind_style[e.kind]}]",
            desc,
            e.reference[:16],
            _money(e.signed_amount),
            _money(line.running_balance),
        )
    console.print(table)

    console.print(f"  Total charges:   {_money(statement.total_charges):>14}")
    console.print(f"  Total payments:  {_money(-statement.total_payments):>14}")
    console.print(f"  Total credits:   {_money(-statement.total_credits):>14}")
    console.print(f"  Current balance: {_money(statement.current_balance):>14}")
    if statement.status.value == "paid":
        console.print("  Status: [green]PAID[/green]")
    else:
        console.print(f"  Status: [red]OVERDUE[/red] ({_money(statement.amount_due)} due)")

    for d in statement.discrepancies:
        console.print(
            f"[yellow]Warning: upstream balance {_money(d.reported)} != computed "
            f"{_money(d.computed)} on {d.date.date().isoformat()} ({d.reference or f'line {d.index + 1}'})[/yellow]"
        )


def _display_valuation(result: AggregateValuation, title: str) -> None:
    """Display per-source estimates and the composite."""
    table = Table(title=title)
    table.add_column("Source", style="cyan")
    table.add_column("Estimate", justify="right")
    table.add_column("Low", justify="right", style="dim")
    table.add_column("High", justify="right", style="dim")
    table.add_column("Confidence", justify="right")
    for e in result.estimates:
        table.add_row(
            e.source,
            f"${e.estimate:,.0f}",
            f"${e.low:,.0f}",
            f"${e.high:,.0f}",
            f"{e.confidence:.0%}",
        )
    console.print(table)
    console.print(
        f"[bold]Composite: ${result.weighted_estimate:,.0f}[/bold] "
        f"(range ${result.low:,.0f} - ${result.high:,.0f}, {result.sources} sources)"
    )


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Tenant statements and property valuations."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


@app.command()
def statement(
    records_path: Path = typer.Argument(..., help="Raw records (.json or .csv)"),
    source: str = typer.Option("generic", "--source", "-s", help="Upstream source tag"),
    lease: Optional[str] = typer.Option(None, "--lease", "-l", help="Lease id (default: one statement per lease)"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
    csv_path: Optional[Path] = typer.Option(None, "--csv", help="Write statement lines to CSV"),
    json_path: Optional[Path] = typer.Option(None, "--json", help="Write full statement to JSON"),
    strict: bool = typer.Option(False, "--strict", help="Fail if any record is rejected"),
) -> None:
    """Normalize raw ledger records and print the tenant statement."""
    cfg = _load_cfg(config_path)
    try:
        params = get_statement_params(cfg)
        normalizer = RecordNormalizer(get_source_schemas(cfg))
    except ConfigError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)
    records = _load_records(records_path)

    if source not in normalizer.sources:
        console.print(f"[red]Unknown source {escape(repr(source))}. Known: {', '.join(normalizer.sources)}[/red]")
        raise typer.Exit(1)

    result = normalizer.normalize_many(records, source, lease_id=lease)

    for err in result.errors:
        console.print(f"[yellow]Warning: record {err.index} rejected: {escape(err.message)}[/yellow]")
    console.print(f"[dim]{len(result.entries)} entries normalized, {len(result.errors)} rejected[/dim]")
    if strict and result.errors:
        raise typer.Exit(1)

    builder = StatementBuilder(tolerance=params.balance_tolerance)
    try:
        if lease:
            statements = {lease: builder.build(lease, result.entries)}
        else:
            statements = builder.build_many(result.entries)
    except LeaseMismatchError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    if not statements:
        console.print("[yellow]No entries to report.[/yellow]")
        raise typer.Exit(1)

    for st in statements.values():
        _display_statement(st)
        console.print()

    multiple = len(statements) > 1
    for lease_id, st in statements.items():
        if csv_path:
            out = _export_path(csv_path, lease_id) if multiple else csv_path
            export_statement_csv(st, out)
            console.print(f"  CSV:  {out}")
        if json_path:
            out = _export_path(json_path, lease_id) if multiple else json_path
            export_statement_json(st, out)
            console.print(f"  JSON: {out}")


@app.command()
def valuation(
    estimates_path: Path = typer.Argument(..., help="JSON array of per-source estimates"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
    json_path: Optional[Path] = typer.Option(None, "--json", help="Write composite valuation to JSON"),
) -> None:
    """Combine stored valuation estimates into one composite value."""
    cfg = _load_cfg(config_path)
    try:
        vparams = get_valuation_params(cfg)
    except ConfigError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)
    rows = _load_records(estimates_path)

    estimates: list[ValuationEstimate] = []
    for i, row in enumerate(rows):
        source = str(row.get("source") or "manual").strip().lower()
        if source not in VALUATION_SOURCES:
            console.print(f"[yellow]Warning: estimate {i} has unrecognized source {source!r}[/yellow]")
        try:
            est = _opt_float(row, "estimate")
            if est is None:
                raise ValueError("missing estimate")
            low = _opt_float(row, "low")
            high = _opt_float(row, "high")
            conf = _opt_float(row, "confidence")
            estimates.append(
                ValuationEstimate(
                    source=source,
                    estimate=est,
                    low=est if low is None else low,
                    high=est if high is None else high,
                    confidence=conf
                    if conf is not None
                    else default_confidence(source, vparams.confidence, vparams.default_confidence),
                    rental_estimate=_opt_float(row, "rental_estimate"),
                )
            )
        except (TypeError, ValueError) as e:
            console.print(f"[yellow]Warning: estimate {i} ({source}) skipped: {e!s}[/yellow]")

    result = aggregate_valuations(estimates)
    _display_valuation(result, f"Valuation ({estimates_path.name})")
    if json_path:
        export_valuation_json(result, json_path)
        console.print(f"  JSON: {json_path}")


@app.command()
def appraise(
    address: str = typer.Argument(..., help="Full property address"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
    json_path: Optional[Path] = typer.Option(None, "--json", help="Write composite valuation to JSON"),
) -> None:
    """Fetch estimates from every configured provider and combine them."""
    cfg = _load_cfg(config_path)
    try:
        pparams = get_provider_params(cfg)
    except ConfigError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)
    env = dict(os.environ)

    with httpx.Client(timeout=pparams.timeout_seconds) as client:
        providers = get_available_providers(env, client)
        console.print(f"[dim]Querying {', '.join(p.name for p in providers)}...[/dim]")
        estimates = fetch_all_estimates(address, providers)

    if not estimates:
        console.print("[yellow]No provider returned an estimate. Check API keys in .env.[/yellow]")
    result = aggregate_valuations(estimates)
    _display_valuation(result, address)
    if json_path:
        export_valuation_json(result, json_path)
        console.print(f"  JSON: {json_path}")


@app.command()
def providers() -> None:
    """List valuation providers and whether each is configured."""
    env = dict(os.environ)
    table = Table(title="Valuation Providers")
    table.add_column("Provider", style="cyan")
    table.add_column("API key")
    table.add_column("Configured", justify="center")
    for cls in ALL_PROVIDERS:
        table.add_row(
            cls.name,
            cls.env_key or "[dim](none)[/dim]",
            "✓" if cls.is_configured(env) else "✗",
        )
    console.print(table)


if __name__ == "__main__":
    app()
