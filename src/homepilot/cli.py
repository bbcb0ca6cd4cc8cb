"""CLI for HomePilot property analysis."""

from __future__ import annotations

import json
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

from dotenv import load_dotenv
from typing import NoReturn, Optional

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

import typer
from rich.console import Console
from rich.table import Table

from .analysis import AnalysisEngine
from .config import get_generation_params, load_config
from .errors import EngineError
from .generation import ChatCompletionsGenerator, advise as advise_service
from .models import AnalysisResult, GeneratedAnalysis
from .recovery import recover_document
from .storage import Storage, export_csv, export_json

app = typer.Typer(
    name="homepilot",
    help="Property affordability, investment and risk analysis",
)
console = Console()
err_console = Console(stderr=True)


def _get_output_dir() -> Path:
    """Default output directory for runs."""
    return Path("output")


def _get_storage(db_path: Optional[Path] = None) -> Storage:
    """Default storage instance."""
    return Storage(db_path or _get_output_dir() / "homepilot.duckdb")


def _run_id() -> str:
    """Generate run ID from timestamp plus a random suffix."""
    return f"{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:8]}"


def _fail(err: Exception) -> NoReturn:
    console.print(f"[red]Error: {err}[/red]")
    raise typer.Exit(1)


def _read_text(path: Path) -> str:
    if not path.exists():
        console.print(f"[red]File not found: {path}[/red]")
        raise typer.Exit(1)
    return path.read_text(encoding="utf-8")


def _money(v: Optional[float]) -> str:
    return "n/a" if v is None else f"${v:,.0f}"


def _display_analysis(result: AnalysisResult) -> None:
    prop = result.property
    title = prop.address or f"{prop.bedrooms:g} bd / {prop.bathrooms:g} ba"
    table = Table(title=f"{title} ({_money(prop.price)}) - {result.mode}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    afford = result.affordability
    if afford is not None:
        table.add_row("Affordability", f"{afford.score} ({afford.level.value})")
        table.add_row("Monthly payment", _money(afford.payment.total))
        table.add_row("DTI", "n/a" if afford.dti_ratio is None else f"{afford.dti_ratio:.1f}%")
        table.add_row("Cash needed", _money(afford.total_cash_needed))
    inv = result.investment
    table.add_row("Investment", f"{inv.score} ({inv.level})")
    table.add_row("Cash flow/mo", _money(inv.cash_flow_monthly))
    table.add_row("Cap rate", f"{inv.cap_rate:.1f}%")
    table.add_row("DSCR", "n/a" if inv.dscr is None else f"{inv.dscr:.2f}")
    table.add_row("Price vs estimate", result.market.verdict.value)
    table.add_row("Market pace", result.market.pace.value)
    table.add_row("Overall risk", result.risk.overall.value)
    table.add_row("Suggested offer", _money(result.recommendations.suggested_offer))
    console.print(table)

    if result.scenarios:
        sc = Table(title="Down payment options")
        sc.add_column("Down", justify="right")
        sc.add_column("Amount", justify="right")
        sc.add_column("Payment", justify="right")
        sc.add_column("PMI", justify="right")
        sc.add_column("Note", style="dim")
        for s in result.scenarios:
            sc.add_row(f"{s.percentage}%", _money(s.amount), _money(s.monthly_payment), _money(s.pmi), s.recommendation)
        console.print(sc)

    console.print(f"\n{result.advisor_message}")
    for w in result.warnings:
        console.print(f"[yellow]Warning: {w}[/yellow]")


def _display_generated(generated: GeneratedAnalysis) -> None:
    table = Table(title="Generated analysis" + (" (repaired)" if generated.repaired else ""))
    table.add_column("Field", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Score", "n/a" if generated.score is None else str(generated.score))
    table.add_row("Level", generated.level or "n/a")
    table.add_row("Monthly payment", _money(generated.monthly_payment))
    table.add_row("DTI", "n/a" if generated.dti_ratio is None else f"{generated.dti_ratio:.1f}%")
    console.print(table)
    if generated.advisor_message:
        console.print(f"\n{generated.advisor_message}")
    for i in generated.insights:
        console.print(f"[green]+ {i}[/green]")
    for w in generated.warnings:
        console.print(f"[yellow]Warning: {w}[/yellow]")


@app.command()
def analyze(
    request_path: Path = typer.Argument(..., help="JSON request, or a list of requests"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
    save: bool = typer.Option(False, "--save", help="Store results in DuckDB"),
    db_path: Optional[Path] = typer.Option(None, "--db", help="DuckDB file (default: output/homepilot.duckdb)"),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Export results to .json or .csv"),
) -> None:
    """Analyze one or more property + profile requests."""
    try:
        payload = json.loads(_read_text(request_path))
    except json.JSONDecodeError as e:
        _fail(e)
    requests = payload if isinstance(payload, list) else [payload]

    cfg = load_config(config_path)
    engine = AnalysisEngine(config=cfg)
    try:
        results = engine.analyze_many(requests)
    except EngineError as e:
        _fail(e)

    for r in results:
        _display_analysis(r)

    run_id = _run_id()
    if save:
        storage = _get_storage(db_path)
        storage.save_analyses(run_id, results)
        storage.close()
        console.print(f"[green]Saved {len(results)} analyses. Run ID: {run_id}[/green]")
    if out:
        if out.suffix.lower() == ".csv":
            export_csv(results, out)
        else:
            export_json(results, out)
        console.print(f"[dim]Full details: {out}[/dim]")


@app.command()
def recover(
    raw_path: Path = typer.Argument(..., help="Raw generator output"),
) -> None:
    """Repair truncated generator output and print the JSON document."""
    try:
        doc = recover_document(_read_text(raw_path))
    except EngineError as e:
        _fail(e)
    if doc.repaired:
        err_console.print("[yellow]Document was truncated and has been repaired.[/yellow]")
    typer.echo(json.dumps(doc.data, indent=2))


@app.command()
def advise(
    prompt_path: Path = typer.Argument(..., help="Prompt text file"),
    system_path: Optional[Path] = typer.Option(None, "--system", "-s", help="System prompt text file"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Override generation model"),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Override API base URL"),
    save: bool = typer.Option(False, "--save", help="Store the recovered record in DuckDB"),
    db_path: Optional[Path] = typer.Option(None, "--db", help="DuckDB file (default: output/homepilot.duckdb)"),
) -> None:
    """Ask the text generator for an analysis and recover its output."""
    cfg = load_config(config_path)
    params = get_generation_params(cfg)
    overrides = {k: v for k, v in (("model", model), ("base_url", base_url)) if v}
    if overrides:
        params = replace(params, **overrides)

    prompt = _read_text(prompt_path)
    system_prompt = _read_text(system_path) if system_path else None
    generator = ChatCompletionsGenerator(params)
    console.print(f"[bold]Requesting analysis from {params.model}...[/bold]")
    try:
        generated = advise_service(generator, prompt, system_prompt=system_prompt)
    except EngineError as e:
        _fail(e)

    _display_generated(generated)
    if save:
        run_id = _run_id()
        storage = _get_storage(db_path)
        storage.save_generated(run_id, generated)
        storage.close()
        console.print(f"[green]Saved generated analysis. Run ID: {run_id}[/green]")


@app.command()
def history(
    limit: int = typer.Option(20, "--limit", "-n", help="Max analyses to show"),
    db_path: Optional[Path] = typer.Option(None, "--db", help="DuckDB file (default: output/homepilot.duckdb)"),
) -> None:
    """Show stored analyses, newest first."""
    storage = _get_storage(db_path)
    rows = storage.load_analyses(limit=limit)
    storage.close()

    if not rows:
        console.print("[yellow]No stored analyses. Run 'analyze --save' first.[/yellow]")
        return

    table = Table(title="Stored analyses")
    table.add_column("Run", style="dim")
    table.add_column("Mode")
    table.add_column("Address", style="cyan")
    table.add_column("Price", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Level")
    table.add_column("Risk")
    for r in rows:
        addr = r.get("address") or ""
        addr_display = addr[:30] + "..." if len(addr) > 30 else addr
        table.add_row(
            r["run_id"],
            r["mode"],
            addr_display,
            _money(r.get("price")),
            str(r.get("score")),
            str(r.get("level")),
            str(r.get("overall_risk")),
        )
    console.print(table)


if __name__ == "__main__":
    app()
