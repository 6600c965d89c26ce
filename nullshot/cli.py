"""Nullshot - audit, fix and generate Solidity contracts from the terminal."""

import json
import logging
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .audit.models import AuditReport, Severity
from .audit.orchestrator import evaluate_report
from .errors import NullshotError
from .services import Services, build_services
from .utils.config_loader import load_config

app = typer.Typer(
    name="nullshot",
    help="Smart-contract audit and fix pipeline",
    add_completion=False,
)
console = Console()

SEVERITY_STYLE = {Severity.HIGH: "bold red", Severity.MEDIUM: "yellow", Severity.LOW: "cyan"}


def _services(config: Path | None, heuristic: bool) -> Services:
    load_dotenv()
    cfg = load_config(config)
    level = str((cfg.get("logging") or {}).get("level", "WARNING")).upper()
    logging.basicConfig(level=level)
    return build_services(cfg, heuristic_only=heuristic)


def _read_source(path: Path) -> str:
    if not path.exists():
        console.print(f"[red]File not found:[/red] {path}")
        raise typer.Exit(1)
    return path.read_text()


def _print_report(report: AuditReport):
    verdict = evaluate_report(report)
    style = {"APPROVE": "green", "WARN": "yellow", "REJECT": "red"}[verdict.value]
    console.print(Panel(
        f"{report.summary}\n\nScore: [bold]{report.score}[/bold]/100   "
        f"Verdict: [{style}]{verdict.value}[/{style}]   Source: {report.source}",
        title=f"Audit {report.id}",
    ))
    if not report.vulnerabilities:
        return
    table = Table(show_header=True, header_style="bold")
    table.add_column("ID")
    table.add_column("Severity")
    table.add_column("Title")
    table.add_column("Lines")
    for v in report.vulnerabilities:
        lines = f"{v.line_start}-{v.line_end}" if v.line_start else "-"
        sev = SEVERITY_STYLE.get(v.severity, "")
        table.add_row(v.id, f"[{sev}]{v.severity.value}[/{sev}]", v.title, lines)
    console.print(table)


@app.command()
def audit(
    source: Path = typer.Argument(..., help="Solidity file to audit"),
    heuristic: bool = typer.Option(False, "--heuristic", help="Skip the model; use heuristic checks only"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
    config: Path = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
):
    """Audit a contract and print the vulnerability report."""
    services = _services(config, heuristic)
    try:
        report = services.audit(_read_source(source))
    except NullshotError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    if output_json:
        console.print_json(json.dumps(report.to_wire()))
    else:
        _print_report(report)


@app.command()
def fix(
    source: Path = typer.Argument(..., help="Solidity file to fix"),
    output: Path = typer.Option(None, "--output", "-o", help="Write the fixed contract here"),
    heuristic: bool = typer.Option(False, "--heuristic", help="Skip the model; use heuristic rewrites only"),
    config: Path = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
):
    """Audit a contract, then fix every finding in one pass."""
    services = _services(config, heuristic)
    code = _read_source(source)
    try:
        report = services.audit(code)
        if not report.vulnerabilities:
            console.print("[green]No vulnerabilities found; nothing to fix.[/green]")
            return
        suggestion = services.fix(code, report.vulnerabilities)
    except NullshotError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(Panel(suggestion.explanation, title=f"Fix ({suggestion.source})"))
    if output:
        output.write_text(suggestion.fixed_code)
        console.print(f"[green]Fixed contract written to[/green] {output}")
    else:
        console.print(suggestion.fixed_code, markup=False, highlight=False)


@app.command()
def generate(
    prompt: str = typer.Argument(..., help="What the contract should do"),
    output: Path = typer.Option(None, "--output", "-o", help="Write the contract here"),
    heuristic: bool = typer.Option(False, "--heuristic", help="Use built-in templates only"),
    config: Path = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
):
    """Generate a contract from a natural-language request."""
    services = _services(config, heuristic)
    try:
        contract = services.generate(prompt)
    except NullshotError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    console.print(Panel(contract.explanation, title=f"Contract ({contract.source})"))
    if output:
        output.write_text(contract.code)
        console.print(f"[green]Contract written to[/green] {output}")
    else:
        console.print(contract.code, markup=False, highlight=False)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Port"),
):
    """Run the HTTP API."""
    import uvicorn
    uvicorn.run("backend.main:app", host=host, port=port)


def main():
    app()


if __name__ == "__main__":
    main()
